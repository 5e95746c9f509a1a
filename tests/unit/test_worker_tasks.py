"""Unit tests for Celery tasks (run eagerly in tests)"""

from uuid import uuid4

import pytest

from convohub.infrastructure.storage.local_folder_adapter import LocalFolderStorageAdapter
from convohub.workers.base import validate_company_id
from convohub.workers.document_tasks import mark_sync_status
from convohub.workers.mail_tasks import send_invitation_email


class TestValidateCompanyId:

    def test_existing_company(self, test_company):
        assert validate_company_id(str(test_company.id)) == test_company.id

    def test_malformed_id(self, db_session):
        with pytest.raises(ValueError, match="Invalid company_id format"):
            validate_company_id("not-a-uuid")

    def test_unknown_company(self, db_session):
        with pytest.raises(ValueError, match="does not exist"):
            validate_company_id(str(uuid4()))


class TestSendInvitationEmail:

    def test_skipped_without_mail_host(self, test_company):
        result = send_invitation_email.delay(
            email="agent@acme.io",
            company_name=test_company.company_name,
            invite_url="http://localhost:3000/invite?token=t",
            company_id=str(test_company.id),
        ).get()

        assert result == {"status": "skipped", "email": "agent@acme.io", "company_id": str(test_company.id)}

    def test_requires_company_id(self, db_session):
        with pytest.raises(ValueError, match="company_id parameter is required"):
            send_invitation_email.delay(email="a@acme.io", company_name="Acme", invite_url="x", company_id="")


class TestMarkSyncStatus:

    def test_moves_document(self, test_company, document_root):
        company_id = str(test_company.id)
        LocalFolderStorageAdapter(document_root).save(company_id, "1700000000000-1-faq.txt", b"FAQ")

        result = mark_sync_status.delay(
            filename="1700000000000-1-faq.txt",
            target_status="SYNCED",
            company_id=company_id,
        ).get()

        assert result["sync_status"] == "SYNCED"
        storage = LocalFolderStorageAdapter(document_root)
        assert storage.locate(company_id, "1700000000000-1-faq.txt").sync_status.value == "SYNCED"

    def test_invalid_transition(self, test_company, document_root):
        company_id = str(test_company.id)
        storage = LocalFolderStorageAdapter(document_root)
        storage.save(company_id, "1700000000000-2-faq.txt", b"FAQ")
        mark_sync_status.delay(filename="1700000000000-2-faq.txt", target_status="FAILED", company_id=company_id)

        with pytest.raises(ValueError, match="Cannot change sync status"):
            mark_sync_status.delay(
                filename="1700000000000-2-faq.txt",
                target_status="SYNCED",
                company_id=company_id,
            )
