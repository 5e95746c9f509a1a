"""Sync status of uploaded documents

A document's sync status is not stored in the database: it is the folder the
file currently sits in under its company's storage root.

    notprocessed        -> QUEUED   (waiting for external processing)
    processed           -> SYNCED   (ingested successfully)
    failed_to_process   -> FAILED   (ingestion failed, can be re-queued)
"""

from enum import Enum
from typing import Dict, List


class SyncStatus(str, Enum):
    QUEUED = "QUEUED"
    SYNCED = "SYNCED"
    FAILED = "FAILED"


FOLDER_FOR_STATUS: Dict[SyncStatus, str] = {
    SyncStatus.QUEUED: "notprocessed",
    SyncStatus.SYNCED: "processed",
    SyncStatus.FAILED: "failed_to_process",
}

STATUS_FOR_FOLDER: Dict[str, SyncStatus] = {
    folder: sync_status for sync_status, folder in FOLDER_FOR_STATUS.items()
}

# New uploads always start in the QUEUED folder
INITIAL_STATUS = SyncStatus.QUEUED

ALLOWED_TRANSITIONS: Dict[SyncStatus, List[SyncStatus]] = {
    SyncStatus.QUEUED: [SyncStatus.SYNCED, SyncStatus.FAILED],
    SyncStatus.SYNCED: [SyncStatus.QUEUED],  # re-sync after content change
    SyncStatus.FAILED: [SyncStatus.QUEUED],  # retry
}


def folder_for_status(sync_status: SyncStatus) -> str:
    return FOLDER_FOR_STATUS[SyncStatus(sync_status)]


def status_for_folder(folder: str) -> SyncStatus:
    """Map a storage folder name back to its sync status.

    Raises:
        ValueError: If folder is not one of the three sync folders
    """
    try:
        return STATUS_FOR_FOLDER[folder]
    except KeyError:
        raise ValueError(f"Unknown document folder: {folder}")


def can_transition(from_status: SyncStatus, to_status: SyncStatus) -> bool:
    """Validate if a sync status transition is allowed

    Example:
        >>> can_transition(SyncStatus.QUEUED, SyncStatus.SYNCED)
        True
        >>> can_transition(SyncStatus.SYNCED, SyncStatus.FAILED)
        False
    """
    return to_status in ALLOWED_TRANSITIONS.get(from_status, [])


def get_allowed_transitions(from_status: SyncStatus) -> List[SyncStatus]:
    return ALLOWED_TRANSITIONS.get(from_status, [])
