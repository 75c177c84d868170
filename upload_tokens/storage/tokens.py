"""Wire tokens for temporary uploads.

Grammar:
    single-token := "livewire-file:" stored-name
    batch-token  := "livewire-files:" json-array-of-stored-name

Tokens carry stored names only; the disk and backend come from the
deserializer's configuration, so a token is portable only within one
deployment's storage setup.

Examples:
    >>> serialize(ref)
    'livewire-file:Xk3...-metaYS5wbmc=-.png'
    >>> TokenDeserializer(config, backend).deserialize({"form": {"photo": token}})
    {'form': {'photo': TemporaryUploadedFile(disk='local', path='livewire-tmp/Xk3...')}}
"""

from __future__ import annotations

import json
import logging
from collections.abc import Iterable, Mapping
from functools import singledispatchmethod
from typing import Any

from upload_tokens.storage.backends import get_backend
from upload_tokens.storage.backends.base import StorageBackend
from upload_tokens.storage.config import StorageConfig
from upload_tokens.storage.errors import InvalidStoredNameError, InvalidTokenError, UploadError
from upload_tokens.storage.reference import (
    BATCH_PREFIX,
    SINGLE_PREFIX,
    TemporaryUploadedFile,
)

logger = logging.getLogger(__name__)


def serialize(ref: TemporaryUploadedFile) -> str:
    """Single wire token for one reference."""
    return ref.serialize()


def serialize_batch(refs: Iterable[TemporaryUploadedFile]) -> str:
    """Batch wire token for an ordered sequence of references."""
    return BATCH_PREFIX + json.dumps([ref.filename for ref in refs])


def can_deserialize(payload: Any) -> bool:
    """Check whether a payload holds at least one wire token.

    Strings qualify by prefix; mappings and lists qualify if any value
    does, recursively. Everything else is False.
    """
    if isinstance(payload, str):
        return payload.startswith((SINGLE_PREFIX, BATCH_PREFIX))
    if isinstance(payload, Mapping):
        return any(can_deserialize(value) for value in payload.values())
    if isinstance(payload, (list, tuple)):
        return any(can_deserialize(value) for value in payload)
    return False


class TokenDeserializer:
    """Replaces wire tokens in arbitrarily nested payloads with references.

    Attributes:
        config: Storage configuration (disk, temporary directory).
        backend: Backend for the configured disk.
    """

    def __init__(self, config: StorageConfig, backend: StorageBackend | None = None) -> None:
        self.config = config
        self.backend = backend or get_backend(config.disk, config)

    def reference(self, stored_name: str) -> TemporaryUploadedFile:
        """Reference for one stored name on the configured disk."""
        return TemporaryUploadedFile.from_stored_name(stored_name, self.config, self.backend)

    def deserialize(self, payload: Any) -> Any:
        """Transform a payload, replacing token strings with references.

        Mapping keys and sequence order are preserved; leaves that are not
        tokens are returned unchanged.

        Raises:
            InvalidStoredNameError: If a token's stored name is malformed.
            InvalidTokenError: If a batch token's JSON is malformed.
        """
        return self._walk(payload, None)

    def deserialize_partial(self, payload: Any) -> tuple[Any, list[UploadError]]:
        """Transform a payload, collecting per-token failures instead of raising.

        A malformed single token stays in place as its original string; a
        malformed entry of a batch token is left out of the batch.

        Returns:
            Tuple of (transformed payload, errors).
        """
        errors: list[UploadError] = []
        return self._walk(payload, errors), errors

    @singledispatchmethod
    def _walk(self, payload: Any, errors: list[UploadError] | None) -> Any:
        if isinstance(payload, Mapping):
            return {key: self._walk(value, errors) for key, value in payload.items()}
        return payload

    @_walk.register
    def _(self, payload: str, errors: list[UploadError] | None) -> Any:
        if payload.startswith(SINGLE_PREFIX):
            ref = self._reference(payload[len(SINGLE_PREFIX):], errors)
            return payload if ref is None else ref

        if payload.startswith(BATCH_PREFIX):
            try:
                names = _parse_batch(payload[len(BATCH_PREFIX):])
            except InvalidTokenError as e:
                if errors is None:
                    raise
                errors.append(e)
                return payload
            logger.debug(f"Deserializing batch of {len(names)} uploads")
            refs = [self._reference(name, errors) for name in names]
            return [ref for ref in refs if ref is not None]

        return payload

    @_walk.register
    def _(self, payload: list, errors: list[UploadError] | None) -> list:
        return [self._walk(value, errors) for value in payload]

    @_walk.register
    def _(self, payload: tuple, errors: list[UploadError] | None) -> tuple:
        return tuple(self._walk(value, errors) for value in payload)

    @_walk.register
    def _(self, payload: dict, errors: list[UploadError] | None) -> dict:
        return {key: self._walk(value, errors) for key, value in payload.items()}

    def _reference(
        self,
        stored_name: str,
        errors: list[UploadError] | None,
    ) -> TemporaryUploadedFile | None:
        try:
            return self.reference(stored_name)
        except InvalidStoredNameError as e:
            if errors is None:
                raise
            logger.warning(f"Skipping malformed upload token: {e}")
            errors.append(e)
            return None


def _parse_batch(body: str) -> list[str]:
    try:
        names = json.loads(body)
    except json.JSONDecodeError as e:
        raise InvalidTokenError(f"Malformed batch token: {e}") from e
    if not isinstance(names, list) or not all(isinstance(n, str) for n in names):
        raise InvalidTokenError("Batch token must be a JSON array of stored names")
    return names
