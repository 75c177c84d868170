"""Tests for upload_tokens.storage.reference module.

Covers:
    - original_name with and without sidecar
    - size / mime_type / get / exists / read_stream / delete pass-through
    - is_previewable and temporary_url strategy selection
    - store_as / store copies
"""

from datetime import timedelta
from urllib.parse import parse_qs, urlparse

import pytest

from tests.fixtures.storage import PNG_BYTES, make_mock_backend
from upload_tokens.storage import backends
from upload_tokens.storage.backends import LocalStorageBackend, UrlCapability
from upload_tokens.storage.config import StorageConfig
from upload_tokens.storage.errors import InvalidStoredNameError, NotPreviewableError
from upload_tokens.storage.naming import TRUNCATION_PREFIX, encode_stored_name
from upload_tokens.storage.reference import TemporaryUploadedFile
from upload_tokens.storage.signing import verify_preview_signature


def _mock_ref(config, capability, original="My Report (Final).png"):
    backend = make_mock_backend(capability)
    stored = encode_stored_name(original, "png")
    return TemporaryUploadedFile.from_stored_name(stored, config, backend), backend


async def _collect(stream):
    return b"".join([chunk async for chunk in stream])


class TestConstruction:
    """Tests for building references."""

    @pytest.mark.fast
    def test_from_stored_name(self, storage_config, local_backend):
        stored = encode_stored_name("a.txt", "txt")
        ref = TemporaryUploadedFile.from_stored_name(stored, storage_config, local_backend)
        assert ref.path == f"livewire-tmp/{stored}"
        assert ref.disk == "local"
        assert ref.filename == stored
        assert ref.extension == "txt"
        assert ref.is_valid()

    @pytest.mark.fast
    def test_path_segments_are_dropped(self, storage_config, local_backend):
        stored = encode_stored_name("a.txt", "txt")
        ref = TemporaryUploadedFile.from_stored_name(f"../../{stored}", storage_config, local_backend)
        assert ref.path == f"livewire-tmp/{stored}"

    @pytest.mark.fast
    def test_malformed_name_fails_construction(self, storage_config, local_backend):
        with pytest.raises(InvalidStoredNameError):
            TemporaryUploadedFile.from_stored_name("no-marker.txt", storage_config, local_backend)

    @pytest.mark.fast
    def test_equality_by_disk_and_path(self, storage_config, local_backend):
        stored = encode_stored_name("a.txt", "txt")
        a = TemporaryUploadedFile.from_stored_name(stored, storage_config, local_backend)
        b = TemporaryUploadedFile.from_stored_name(stored, storage_config, local_backend)
        assert a == b
        assert hash(a) == hash(b)


class TestOriginalName:
    """Tests for original_name()."""

    @pytest.mark.asyncio
    async def test_embedded_name(self, upload_service):
        ref = await upload_service.store_temporary_file("My Report (Final).pdf", b"%PDF-1.4")
        assert await ref.original_name() == "My Report (Final).pdf"

    @pytest.mark.asyncio
    async def test_truncated_name_from_sidecar(self, upload_service):
        long_name = "x" * 300 + ".txt"
        ref = await upload_service.store_temporary_file(long_name, b"data")
        assert ref.is_truncated
        resolved = upload_service.resolve(ref.filename)
        assert await resolved.original_name() == long_name

    @pytest.mark.asyncio
    async def test_sidecar_miss_degrades_to_marker(self, upload_service):
        ref = await upload_service.store_temporary_file("x" * 300, b"data")
        await upload_service.sidecars.delete(ref.filename)
        name = await ref.original_name()
        assert name.startswith(TRUNCATION_PREFIX)
        assert name != "x" * 300

    @pytest.mark.asyncio
    async def test_short_name_with_marker_prefix_survives(self, upload_service):
        ref = await upload_service.store_temporary_file("[truncated]notes.txt", b"data")
        assert await ref.original_name() == "[truncated]notes.txt"


class TestPassThrough:
    """Tests for byte-level pass-through operations."""

    @pytest.mark.asyncio
    async def test_size_get_exists(self, upload_service):
        ref = await upload_service.store_temporary_file("hello.txt", b"hello world")
        assert await ref.size() == 11
        assert await ref.get() == b"hello world"
        assert await ref.exists() is True

    @pytest.mark.asyncio
    async def test_read_stream(self, upload_service):
        ref = await upload_service.store_temporary_file("big.bin", b"a" * 200_000)
        assert await _collect(ref.read_stream()) == b"a" * 200_000

    @pytest.mark.asyncio
    async def test_delete(self, upload_service):
        ref = await upload_service.store_temporary_file("bye.txt", b"bye")
        assert await ref.delete() is True
        assert await ref.exists() is False

    @pytest.mark.asyncio
    async def test_delete_removes_sidecar(self, upload_service, local_backend):
        ref = await upload_service.store_temporary_file("y" * 400 + ".txt", b"bye")
        meta_path = upload_service.sidecars.meta_path(ref.filename)
        assert await local_backend.exists(meta_path)
        await ref.delete()
        assert not await local_backend.exists(meta_path)

    @pytest.mark.asyncio
    async def test_missing_file_propagates_backend_error(self, storage_config, local_backend):
        ref = TemporaryUploadedFile.from_stored_name(
            encode_stored_name("ghost.txt", "txt"), storage_config, local_backend,
        )
        with pytest.raises(FileNotFoundError):
            await ref.get()

    @pytest.mark.asyncio
    async def test_real_path(self, upload_service, storage_config):
        ref = await upload_service.store_temporary_file("where.txt", b"here")
        assert ref.real_path().endswith(f"livewire-tmp/{ref.filename}")
        assert ref.directory_path().endswith("livewire-tmp")


class TestMimeType:
    """Tests for mime_type()."""

    @pytest.mark.asyncio
    async def test_backend_value_used_when_specific(self, storage_config):
        ref, backend = _mock_ref(storage_config, UrlCapability.SELF_SIGNED)
        backend.mime_type.return_value = "image/png"
        assert await ref.mime_type() == "image/png"
        backend.get.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_octet_stream_falls_back_to_content(self, storage_config):
        ref, backend = _mock_ref(storage_config, UrlCapability.SELF_SIGNED)
        backend.mime_type.return_value = "application/octet-stream"
        backend.get.return_value = PNG_BYTES
        assert await ref.mime_type() == "image/png"

    @pytest.mark.asyncio
    async def test_local_png(self, upload_service):
        ref = await upload_service.store_temporary_file("pic.png", PNG_BYTES)
        assert await ref.mime_type() == "image/png"

    @pytest.mark.asyncio
    async def test_empty_file_uses_extension(self, upload_service):
        ref = await upload_service.store_temporary_file("empty.pdf", b"")
        assert await ref.mime_type() == "application/pdf"

    @pytest.mark.asyncio
    async def test_empty_file_unknown_extension_defaults_to_text(self, upload_service):
        ref = await upload_service.store_temporary_file("empty.qqqzz", b"")
        assert await ref.mime_type() == "text/plain"


class TestPreview:
    """Tests for is_previewable() and temporary_url()."""

    @pytest.mark.fast
    @pytest.mark.parametrize("filename, expected", [
        ("photo.png", True),
        ("PHOTO.JPG", True),
        ("clip.mp4", True),
        ("song.mp3", True),
        ("doc.pdf", False),
        ("noext", False),
    ])
    def test_is_previewable(self, storage_config, local_backend, filename, expected):
        ext = filename.rsplit(".", 1)[-1] if "." in filename else ""
        ref = TemporaryUploadedFile.from_stored_name(
            encode_stored_name(filename, ext), storage_config, local_backend,
        )
        assert ref.is_previewable() is expected

    @pytest.mark.fast
    def test_preview_list_overridable(self, tmp_path, local_backend):
        config = StorageConfig(root=str(tmp_path), preview_mimes=["pdf"])
        ref = TemporaryUploadedFile.from_stored_name(
            encode_stored_name("doc.pdf", "pdf"), config, local_backend,
        )
        assert ref.is_previewable() is True

    @pytest.mark.asyncio
    async def test_not_previewable_raises(self, storage_config, local_backend):
        ref = TemporaryUploadedFile.from_stored_name(
            encode_stored_name("doc.pdf", "pdf"), storage_config, local_backend,
        )
        with pytest.raises(NotPreviewableError, match="pdf"):
            await ref.temporary_url()

    @pytest.mark.asyncio
    async def test_native_expiring_url(self, storage_config):
        ref, backend = _mock_ref(storage_config, UrlCapability.NATIVE_EXPIRING)
        url = await ref.temporary_url()
        assert url == "https://bucket.example/signed"

        path, ttl, options = backend.issue_temporary_url.await_args.args
        assert path == ref.path
        assert timedelta(hours=23, minutes=59) <= ttl <= timedelta(hours=25)
        assert options == {
            "ResponseContentDisposition": 'attachment; filename="My+Report+%28Final%29.png"',
        }

    @pytest.mark.asyncio
    async def test_generic_temporary_url(self, storage_config):
        ref, backend = _mock_ref(storage_config, UrlCapability.GENERIC_TEMPORARY)
        await ref.temporary_url()
        backend.issue_temporary_url.assert_awaited_once_with(ref.path, timedelta(hours=24))

    @pytest.mark.asyncio
    async def test_self_signed_url(self, storage_config):
        ref, backend = _mock_ref(storage_config, UrlCapability.SELF_SIGNED)
        url = await ref.temporary_url()
        backend.issue_temporary_url.assert_not_awaited()

        parsed = urlparse(url)
        assert parsed.netloc == "testserver"
        assert parsed.path.startswith("/livewire/preview-file/")
        query = parse_qs(parsed.query)
        assert "expires" in query
        verify_preview_signature(ref.filename, query["signature"][0], storage_config)


class TestStore:
    """Tests for store_as() and store()."""

    @pytest.mark.asyncio
    async def test_store_as_same_disk(self, upload_service, local_backend):
        ref = await upload_service.store_temporary_file("avatar.png", PNG_BYTES)
        final = await ref.store_as("/avatars/", "user-1.png")
        assert final == "avatars/user-1.png"
        assert await local_backend.get(final) == PNG_BYTES
        assert await ref.exists()

    @pytest.mark.asyncio
    async def test_store_as_without_name(self, upload_service, local_backend):
        ref = await upload_service.store_temporary_file("a.txt", b"abc")
        final = await ref.store_as("docs/a.txt")
        assert final == "docs/a.txt"
        assert await local_backend.get(final) == b"abc"

    @pytest.mark.asyncio
    async def test_store_as_other_disk(self, upload_service, tmp_path, monkeypatch):
        archive = LocalStorageBackend(tmp_path / "archive")
        monkeypatch.setitem(backends._registry, "archive", lambda config: archive)

        ref = await upload_service.store_temporary_file("a.txt", b"abc")
        final = await ref.store_as("keep", "a.txt", {"disk": "archive"})
        assert final == "keep/a.txt"
        assert await archive.get(final) == b"abc"

    @pytest.mark.asyncio
    async def test_store_as_disk_string(self, upload_service, tmp_path, monkeypatch):
        archive = LocalStorageBackend(tmp_path / "archive")
        monkeypatch.setitem(backends._registry, "archive", lambda config: archive)

        ref = await upload_service.store_temporary_file("a.txt", b"abc")
        await ref.store_as("keep", "b.txt", "archive")
        assert await archive.exists("keep/b.txt")

    @pytest.mark.asyncio
    async def test_store_generates_name(self, upload_service, local_backend):
        ref = await upload_service.store_temporary_file("Photo.PNG", PNG_BYTES)
        final = await ref.store("photos")
        assert final.startswith("photos/")
        assert final.endswith(".png")
        assert len(final.split("/")[1]) == 44
        assert await local_backend.exists(final)


@pytest.mark.fast
def test_serialize(storage_config, local_backend):
    stored = encode_stored_name("a.txt", "txt")
    ref = TemporaryUploadedFile.from_stored_name(stored, storage_config, local_backend)
    assert ref.serialize() == f"livewire-file:{stored}"
