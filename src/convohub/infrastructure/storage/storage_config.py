"""Storage configuration for document storage.

Selects the document storage backend from the application settings. The local
backend keeps per-company folders on disk; the S3 backend works with AWS S3
and S3-compatible services such as MinIO.
"""

from dataclasses import dataclass
from typing import Optional

from ...config import Settings, get_settings
from ...domain.documents.ports.document_storage_port import DocumentStoragePort


SUPPORTED_BACKENDS = ("local", "s3")


@dataclass
class StorageConfig:
    """Configuration for document storage.

    Attributes:
        backend: 'local' or 's3'
        local_root: Root folder for the local backend
        s3_endpoint_url: S3 endpoint URL (None for AWS default endpoints)
        s3_access_key: S3 access key ID
        s3_secret_key: S3 secret access key
        s3_bucket_name: Bucket holding all companies' documents
        s3_region: AWS region
    """
    backend: str = "local"
    local_root: str = "./uploads/documents"
    s3_endpoint_url: Optional[str] = None
    s3_access_key: Optional[str] = None
    s3_secret_key: Optional[str] = None
    s3_bucket_name: str = "convohub-documents"
    s3_region: str = "us-east-1"


def load_storage_config(settings: Optional[Settings] = None) -> StorageConfig:
    """Build the storage configuration from Settings.

    Settings fields:
        DOCUMENT_STORAGE_BACKEND: 'local' (default) or 's3'
        DOCUMENT_UPLOAD_PATH: Root folder for the local backend
        S3_ENDPOINT_URL: Endpoint for MinIO or other S3-compatible services
        S3_ACCESS_KEY_ID / S3_SECRET_ACCESS_KEY: Credentials
        S3_BUCKET_NAME, S3_REGION
    """
    settings = settings or get_settings()
    return StorageConfig(
        backend=settings.DOCUMENT_STORAGE_BACKEND.lower(),
        local_root=settings.DOCUMENT_UPLOAD_PATH,
        s3_endpoint_url=settings.S3_ENDPOINT_URL or None,
        s3_access_key=settings.S3_ACCESS_KEY_ID,
        s3_secret_key=settings.S3_SECRET_ACCESS_KEY,
        s3_bucket_name=settings.S3_BUCKET_NAME,
        s3_region=settings.S3_REGION,
    )


def validate_storage_config(config: StorageConfig) -> None:
    """Validate storage configuration.

    Raises:
        ValueError: If configuration is invalid
    """
    if config.backend not in SUPPORTED_BACKENDS:
        raise ValueError(
            f"Unsupported storage backend: {config.backend}. "
            f"Use one of: {', '.join(SUPPORTED_BACKENDS)}"
        )

    if config.backend == "local":
        if not config.local_root:
            raise ValueError("DOCUMENT_UPLOAD_PATH is required for the local backend")
        return

    if not config.s3_access_key or not config.s3_secret_key:
        raise ValueError(
            "Missing required storage credentials. "
            "Set S3_ACCESS_KEY_ID and S3_SECRET_ACCESS_KEY environment variables."
        )

    if not config.s3_bucket_name:
        raise ValueError("S3_BUCKET_NAME is required")

    if config.s3_endpoint_url:
        if not config.s3_endpoint_url.startswith(("http://", "https://")):
            raise ValueError(
                f"Invalid endpoint_url: {config.s3_endpoint_url}. "
                "Must start with http:// or https://"
            )
    elif not config.s3_region:
        raise ValueError("S3_REGION is required when S3_ENDPOINT_URL is not set")


def build_document_storage(config: Optional[StorageConfig] = None) -> DocumentStoragePort:
    """Create the configured DocumentStoragePort implementation."""
    config = config or load_storage_config()
    validate_storage_config(config)

    if config.backend == "s3":
        from .s3_folder_adapter import S3FolderStorageAdapter

        return S3FolderStorageAdapter(
            endpoint_url=config.s3_endpoint_url,
            access_key=config.s3_access_key,
            secret_key=config.s3_secret_key,
            bucket_name=config.s3_bucket_name,
            region=config.s3_region,
        )

    from .local_folder_adapter import LocalFolderStorageAdapter

    return LocalFolderStorageAdapter(config.local_root)
