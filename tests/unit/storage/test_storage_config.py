"""Unit tests for storage backend selection"""

import pytest

from convohub.infrastructure.storage import (
    StorageConfig,
    build_document_storage,
    load_storage_config,
    validate_storage_config,
)
from convohub.config import Settings
from convohub.infrastructure.storage.local_folder_adapter import LocalFolderStorageAdapter


def test_settings_default_to_local(tmp_path):
    config = load_storage_config(Settings(DOCUMENT_UPLOAD_PATH=str(tmp_path)))

    assert config.backend == "local"
    assert config.local_root == str(tmp_path)
    assert isinstance(build_document_storage(config), LocalFolderStorageAdapter)


def test_backend_name_is_case_insensitive():
    assert load_storage_config(Settings(DOCUMENT_STORAGE_BACKEND="S3")).backend == "s3"


def test_reads_cached_settings(document_root):
    config = load_storage_config()

    assert config.local_root == str(document_root)
    assert isinstance(build_document_storage(), LocalFolderStorageAdapter)


def test_s3_fields_come_from_settings():
    config = load_storage_config(Settings(
        DOCUMENT_STORAGE_BACKEND="s3",
        S3_ENDPOINT_URL="",
        S3_BUCKET_NAME="acme-docs",
        S3_REGION="eu-central-1",
    ))

    assert config.s3_endpoint_url is None
    assert config.s3_bucket_name == "acme-docs"
    assert config.s3_region == "eu-central-1"


class TestValidateStorageConfig:

    def test_unknown_backend(self):
        with pytest.raises(ValueError, match="Unsupported storage backend"):
            validate_storage_config(StorageConfig(backend="ftp"))

    def test_s3_requires_credentials(self):
        with pytest.raises(ValueError, match="Missing required storage credentials"):
            validate_storage_config(StorageConfig(backend="s3"))

    def test_s3_endpoint_must_be_http(self):
        config = StorageConfig(
            backend="s3", s3_access_key="k", s3_secret_key="s", s3_endpoint_url="minio:9000"
        )
        with pytest.raises(ValueError, match="Invalid endpoint_url"):
            validate_storage_config(config)

    def test_valid_s3_config(self):
        validate_storage_config(StorageConfig(
            backend="s3", s3_access_key="k", s3_secret_key="s", s3_endpoint_url="http://localhost:9000"
        ))
