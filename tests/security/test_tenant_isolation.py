"""Security tests: one company can never read or change another company's data.

Cross-tenant access answers 404 (not 403) so ids cannot be probed.
"""

import pytest


pytestmark = pytest.mark.security

AGENT = {
    "agent_name": "Globex Bot",
    "personality": "Formal",
    "general_instructions": "Answer billing questions.",
    "choice_when_unable": "transfer",
    "conversation_pass_instructions": "Escalate disputes.",
    "auto_transfer": "enabled",
    "transfer_connecting_message": "One moment please.",
}


@pytest.fixture
def foreign(other_admin_client):
    """Resources owned by the other company, created through its own admin."""
    department = other_admin_client.post("/api/v1/department", json={"department_name": "Billing"}).json()
    shift = other_admin_client.post("/api/v1/shift", json={
        "shift_name": "Night",
        "shift_start_time": "22:00",
        "shift_end_time": "23:59",
    }).json()
    agent = other_admin_client.post("/api/v1/ai-agents", json=AGENT).json()
    weburi = other_admin_client.post(
        "/api/v1/weburi-resources", json={"uri": "https://globex.example/faq"}
    ).json()
    connection = other_admin_client.post("/api/v1/social-connections", json={
        "platform_name": "Globex Page",
        "platform_type": "facebook",
        "platform_token": "globex-secret-token",
    }).json()
    conversation = other_admin_client.post("/api/v1/messenger-factory/conversations", json={
        "customer_id": "globex-customer",
        "customer_name": "Hank",
        "conversation_source": "WEB",
    }).json()
    message = other_admin_client.post("/api/v1/messenger-factory/messages", json={
        "conversation_id": conversation["conversation_id"],
        "sender": "Hank",
        "message": "Where is my order?",
    }).json()
    return {
        "department": department["id"],
        "shift": shift["id"],
        "agent": agent["id"],
        "weburi": weburi["id"],
        "connection": connection["id"],
        "conversation": conversation["conversation_id"],
        "message": message["message_id"],
    }


@pytest.mark.parametrize("path", [
    "/api/v1/department/{department}",
    "/api/v1/shift/{shift}",
    "/api/v1/ai-agents/{agent}",
    "/api/v1/weburi-resources/{weburi}",
    "/api/v1/social-connections/{connection}",
    "/api/v1/messenger-factory/conversations/inbox/{conversation}",
    "/api/v1/messenger-factory/conversations/inbox/{conversation}/orders",
])
def test_cross_tenant_read(admin_client, foreign, path):
    assert admin_client.get(path.format(**foreign)).status_code == 404


@pytest.mark.parametrize("path,payload", [
    ("/api/v1/department/{department}", {"department_name": "Hijacked"}),
    ("/api/v1/shift/{shift}", {"shift_name": "Hijacked"}),
    ("/api/v1/ai-agents/{agent}", {"agent_name": "Hijacked"}),
    ("/api/v1/weburi-resources/{weburi}", {"status": "FAILED"}),
    ("/api/v1/messenger-factory/conversations/{conversation}", {"conversation_status": "closed"}),
    ("/api/v1/messenger-factory/messages/{message}", {"message": "Hijacked"}),
])
def test_cross_tenant_update(admin_client, foreign, path, payload):
    assert admin_client.patch(path.format(**foreign), json=payload).status_code == 404


@pytest.mark.parametrize("path", [
    "/api/v1/department/{department}",
    "/api/v1/shift/{shift}",
    "/api/v1/ai-agents/{agent}",
    "/api/v1/weburi-resources/{weburi}",
    "/api/v1/social-connections/{connection}",
])
def test_cross_tenant_delete(admin_client, other_admin_client, foreign, path):
    assert admin_client.delete(path.format(**foreign)).status_code == 404
    assert other_admin_client.get(path.format(**foreign)).status_code == 200


def test_cross_tenant_message_post(admin_client, foreign):
    response = admin_client.post("/api/v1/messenger-factory/messages", json={
        "conversation_id": foreign["conversation"],
        "sender": "Mallory",
        "message": "Injected",
    })
    assert response.status_code == 404


def test_lists_are_scoped(admin_client, foreign):
    assert admin_client.get("/api/v1/department").json() == []
    assert admin_client.get("/api/v1/ai-agents").json() == []
    assert admin_client.get("/api/v1/weburi-resources").json() == []
    assert admin_client.get("/api/v1/social-connections").json() == []
    assert admin_client.get("/api/v1/messenger-factory/conversations").json() == []
    assert admin_client.get("/api/v1/social-connections/stats/overview").json()["total"] == 0


def test_documents_are_isolated(admin_client, other_admin_client, document_root):
    upload = other_admin_client.post(
        "/api/v1/documents/upload",
        files={"file": ("contract.pdf", b"%PDF-1.4 globex", "application/pdf")},
    ).json()
    filename = upload["filename"]

    assert admin_client.get("/api/v1/documents/list").json()["total"] == 0
    assert admin_client.get(f"/api/v1/documents/{filename}").status_code == 404
    assert admin_client.get(f"/api/v1/documents/{filename}/download").status_code == 404
    assert admin_client.patch(
        f"/api/v1/documents/{filename}/status", json={"sync_status": "SYNCED"}
    ).status_code == 404
    assert admin_client.delete(f"/api/v1/documents/{filename}").status_code == 404
    assert other_admin_client.get(f"/api/v1/documents/{filename}").status_code == 200


def test_company_profile_is_own(admin_client, test_company):
    assert admin_client.get("/api/v1/company/profile").json()["company"]["id"] == str(test_company.id)
