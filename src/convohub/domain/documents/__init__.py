"""Documents domain module - upload validation, storage naming and sync status"""

from .sync_status import (
    SyncStatus,
    FOLDER_FOR_STATUS,
    ALLOWED_TRANSITIONS,
    can_transition,
    folder_for_status,
    status_for_folder,
)
from .validation import (
    is_supported_mime_type,
    is_avatar_mime_type,
    validate_file_size,
    validate_upload_filename,
    is_safe_stored_filename,
    is_valid_company_folder,
    sanitize_filename,
    build_stored_filename,
    original_name_from_stored,
    mime_type_for_filename,
    SUPPORTED_MIME_TYPES,
    UNSUPPORTED_TYPE_MESSAGE,
    MAX_FILE_SIZE,
    MAX_BATCH_FILES,
    MAX_AVATAR_SIZE,
)

__all__ = [
    "SyncStatus",
    "FOLDER_FOR_STATUS",
    "ALLOWED_TRANSITIONS",
    "can_transition",
    "folder_for_status",
    "status_for_folder",
    "is_supported_mime_type",
    "is_avatar_mime_type",
    "validate_file_size",
    "validate_upload_filename",
    "is_safe_stored_filename",
    "is_valid_company_folder",
    "sanitize_filename",
    "build_stored_filename",
    "original_name_from_stored",
    "mime_type_for_filename",
    "SUPPORTED_MIME_TYPES",
    "UNSUPPORTED_TYPE_MESSAGE",
    "MAX_FILE_SIZE",
    "MAX_BATCH_FILES",
    "MAX_AVATAR_SIZE",
]
