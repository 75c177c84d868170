"""
Pytest configuration and fixtures for upload-tokens tests.

Storage tests run against a LocalStorageBackend rooted in pytest's tmp_path,
or an AsyncMock backend where a backend capability has to be faked.
"""
import logging
import sys
from pathlib import Path
from typing import Generator

import pytest
from fastapi.testclient import TestClient

# Add package to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from upload_tokens.api.dependencies import get_upload_service
from upload_tokens.main import app
from upload_tokens.storage import StorageConfig, TemporaryUploadService
from upload_tokens.storage.backends import LocalStorageBackend

logger = logging.getLogger(__name__)


# ============================================
# Storage Fixtures
# ============================================

@pytest.fixture
def storage_config(tmp_path: Path) -> StorageConfig:
    """Storage config rooted in a temporary directory."""
    return StorageConfig(
        disk="local",
        root=str(tmp_path / "disk"),
        app_url="http://testserver",
        signing_key="test-signing-key-for-preview-urls-0123456789",
    )


@pytest.fixture
def local_backend(storage_config: StorageConfig) -> LocalStorageBackend:
    """Local backend over the temporary disk root."""
    return LocalStorageBackend(storage_config.root)


@pytest.fixture
def upload_service(storage_config: StorageConfig, local_backend: LocalStorageBackend) -> TemporaryUploadService:
    """Upload service over the local temporary disk."""
    return TemporaryUploadService(config=storage_config, backend=local_backend)


# ============================================
# API Fixtures
# ============================================

@pytest.fixture
def client(upload_service: TemporaryUploadService) -> Generator[TestClient, None, None]:
    """
    Create a test client bound to the temporary upload service.
    """
    app.dependency_overrides[get_upload_service] = lambda: upload_service

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()


# ============================================
# Pytest Configuration
# ============================================

def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line(
        "markers", "fast: Fast unit tests (no network or external services)"
    )
