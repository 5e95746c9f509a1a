"""Integration tests for the audit log query endpoint"""

from datetime import datetime, timedelta, timezone

import pytest

from conftest import TEST_PASSWORD
from convohub.models.audit_log import AuditLog


pytestmark = pytest.mark.integration


def _entry(db_session, company, action, entity_type="user", created_at=None):
    entry = AuditLog(
        company_id=company.id,
        action=action,
        entity_type=entity_type,
        created_at=created_at or datetime.now(timezone.utc),
    )
    db_session.add(entry)
    db_session.commit()
    return entry


def test_admin_sees_company_entries(admin_client, db_session, test_company, other_company):
    _entry(db_session, test_company, "USER_INVITED", "pending_user")
    _entry(db_session, test_company, "DEPARTMENT_CREATED", "department")
    _entry(db_session, other_company, "USER_INVITED", "pending_user")

    response = admin_client.get("/api/v1/audit")

    assert response.status_code == 200
    body = response.json()
    assert body["total"] == 2
    assert {e["company_id"] for e in body["entries"]} == {str(test_company.id)}


def test_filters(admin_client, db_session, test_company):
    _entry(db_session, test_company, "USER_INVITED", "pending_user")
    _entry(db_session, test_company, "DEPARTMENT_CREATED", "department")

    by_action = admin_client.get("/api/v1/audit", params={"action": "USER_INVITED"}).json()
    by_type = admin_client.get("/api/v1/audit", params={"entity_type": "department"}).json()

    assert [e["action"] for e in by_action["entries"]] == ["USER_INVITED"]
    assert [e["action"] for e in by_type["entries"]] == ["DEPARTMENT_CREATED"]


def test_date_range(admin_client, db_session, test_company):
    now = datetime.now(timezone.utc)
    _entry(db_session, test_company, "OLD_EVENT", created_at=now - timedelta(days=10))
    _entry(db_session, test_company, "NEW_EVENT", created_at=now)

    body = admin_client.get(
        "/api/v1/audit",
        params={"start_date": (now - timedelta(days=1)).isoformat()},
    ).json()

    assert [e["action"] for e in body["entries"]] == ["NEW_EVENT"]


def test_pagination_newest_first(admin_client, db_session, test_company):
    now = datetime.now(timezone.utc)
    for i in range(5):
        _entry(db_session, test_company, f"EVENT_{i}", created_at=now + timedelta(seconds=i))

    body = admin_client.get("/api/v1/audit", params={"page": 2, "per_page": 2}).json()

    assert body["total"] == 5
    assert body["page"] == 2
    assert [e["action"] for e in body["entries"]] == ["EVENT_2", "EVENT_1"]


def test_per_page_limit(admin_client):
    assert admin_client.get("/api/v1/audit", params={"per_page": 101}).status_code == 422


def test_employee_forbidden(employee_client):
    assert employee_client.get("/api/v1/audit").status_code == 403


def test_login_is_audited(client, admin_client, admin_user):
    client.post("/api/v1/auth/login", json={"email": admin_user.email, "password": TEST_PASSWORD})

    body = admin_client.get("/api/v1/audit", params={"action": "LOGIN_SUCCESS"}).json()
    assert body["total"] == 1
    assert body["entries"][0]["actor_id"] == str(admin_user.id)
