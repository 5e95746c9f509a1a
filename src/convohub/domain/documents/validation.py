"""File validation and naming utilities for document and avatar uploads

Stored document names have the form ``{epoch_ms}-{random}-{sanitized}``
so two uploads of the same file never collide and the original name can be
recovered by dropping the first two dash-separated parts.
"""

import os
import re
import secrets
import time
from typing import Optional, Tuple

from ...config import get_settings


# Document uploads: PDF, DOC, DOCX, CSV, TXT, XLS, XLSX
SUPPORTED_MIME_TYPES = {
    'application/pdf',
    'application/msword',  # .doc
    'application/vnd.openxmlformats-officedocument.wordprocessingml.document',  # .docx
    'text/csv',
    'text/plain',
    'application/vnd.ms-excel',  # .xls
    'application/vnd.openxmlformats-officedocument.spreadsheetml.sheet',  # .xlsx
}

UNSUPPORTED_TYPE_MESSAGE = "Invalid file type. Allowed: PDF, DOC, DOCX, CSV, TXT, XLS, XLSX"

AVATAR_MIME_TYPES = {
    'image/jpeg',
    'image/png',
    'image/gif',
    'image/webp',
}

# Content type served for stored files, keyed by lowercase extension
MIME_TYPES_BY_EXTENSION = {
    '.pdf': 'application/pdf',
    '.doc': 'application/msword',
    '.docx': 'application/vnd.openxmlformats-officedocument.wordprocessingml.document',
    '.csv': 'text/csv',
    '.txt': 'text/plain',
    '.xls': 'application/vnd.ms-excel',
    '.xlsx': 'application/vnd.openxmlformats-officedocument.spreadsheetml.sheet',
    '.jpg': 'image/jpeg',
    '.jpeg': 'image/jpeg',
    '.png': 'image/png',
    '.gif': 'image/gif',
    '.webp': 'image/webp',
}

DEFAULT_MIME_TYPE = 'application/octet-stream'

MAX_FILE_SIZE = get_settings().MAX_UPLOAD_SIZE_BYTES
MAX_BATCH_FILES = get_settings().MAX_BATCH_FILES
MAX_AVATAR_SIZE = get_settings().MAX_AVATAR_SIZE_BYTES

_COMPANY_FOLDER_PATTERN = re.compile(r'^[a-zA-Z0-9_-]+$')


def is_supported_mime_type(mime_type: Optional[str]) -> bool:
    """Check if MIME type is accepted for document upload

    Example:
        >>> is_supported_mime_type('text/plain')
        True
        >>> is_supported_mime_type('image/png')
        False
    """
    return mime_type in SUPPORTED_MIME_TYPES


def is_avatar_mime_type(mime_type: Optional[str]) -> bool:
    return mime_type in AVATAR_MIME_TYPES


def validate_file_size(size_bytes: int, max_size: Optional[int] = None) -> Tuple[bool, Optional[str]]:
    """Validate file size is within limits

    Example:
        >>> validate_file_size(0)
        (True, None)
        >>> validate_file_size(11, max_size=10)
        (False, 'File exceeds maximum size of 10 bytes (got 11 bytes)')
    """
    if max_size is None:
        max_size = MAX_FILE_SIZE

    if size_bytes > max_size:
        return False, f"File exceeds maximum size of {max_size} bytes (got {size_bytes} bytes)"

    return True, None


def validate_upload_filename(filename: Optional[str]) -> Tuple[bool, Optional[str]]:
    """Validate a client-supplied upload filename before sanitizing it."""
    if not filename or len(filename.strip()) == 0:
        return False, "Filename cannot be empty"

    if len(filename) > 255:
        return False, f"Filename exceeds 255 characters (got {len(filename)})"

    if '\x00' in filename:
        return False, "Filename contains null bytes"

    return True, None


def is_safe_stored_filename(filename: str) -> bool:
    """Reject names that could escape the company folder.

    Example:
        >>> is_safe_stored_filename('1700000000000-42-report.pdf')
        True
        >>> is_safe_stored_filename('../other-company/secret.pdf')
        False
    """
    if not filename or '..' in filename or '/' in filename or '\\' in filename:
        return False
    return '\x00' not in filename


def is_valid_company_folder(company_id: str) -> bool:
    return bool(_COMPANY_FOLDER_PATTERN.match(company_id))


def sanitize_filename(filename: str) -> str:
    """Sanitize filename for safe storage

    Anything outside ``[a-zA-Z0-9.-]`` becomes ``_`` and ``..`` sequences
    are broken up. Separators are replaced like any other character.

    Example:
        >>> sanitize_filename('Q3 report (final).pdf')
        'Q3_report__final_.pdf'
        >>> sanitize_filename('../../etc/passwd')
        '____etc_passwd'
    """
    filename = re.sub(r'[^a-zA-Z0-9.-]', '_', filename)
    while '..' in filename:
        filename = filename.replace('..', '_')

    if len(filename) > 200:
        name, ext = os.path.splitext(filename)
        filename = name[:200 - len(ext)] + ext

    return filename or 'file'


def build_stored_filename(original_filename: str, now_ms: Optional[int] = None) -> str:
    """Unique storage name: ``{epoch_ms}-{random}-{sanitized original}``."""
    if now_ms is None:
        now_ms = int(time.time() * 1000)
    random_part = secrets.randbelow(1_000_000_000)
    return f"{now_ms}-{random_part}-{sanitize_filename(original_filename)}"


def original_name_from_stored(stored_filename: str) -> str:
    """Recover the (sanitized) original name from a stored filename.

    Example:
        >>> original_name_from_stored('1700000000000-42-price-list.xlsx')
        'price-list.xlsx'
    """
    parts = stored_filename.split('-', 2)
    if len(parts) < 3:
        return stored_filename
    return parts[2]


def mime_type_for_filename(filename: str) -> str:
    """Content type derived from the file extension."""
    return MIME_TYPES_BY_EXTENSION.get(os.path.splitext(filename)[1].lower(), DEFAULT_MIME_TYPE)
