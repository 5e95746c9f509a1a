"""Integration tests for the company profile endpoints"""

import logging

import pytest

from convohub.models.company import Company
from convohub.models.department import Department
from convohub.models.user import User


pytestmark = pytest.mark.integration


class TestCompanyProfile:

    def test_profile_returns_company_and_user(self, guest_client, test_company, guest_user):
        response = guest_client.get("/api/v1/company/profile")

        assert response.status_code == 200
        body = response.json()
        assert body["company"]["id"] == str(test_company.id)
        assert body["company"]["subdomain"] == "acme"
        assert body["user"]["id"] == str(guest_user.id)


class TestCompanyUpdate:

    def test_admin_updates_fields(self, admin_client):
        response = admin_client.patch("/api/v1/company/update", json={
            "bio": "We answer fast",
            "timezone": "Europe/Berlin",
        })

        assert response.status_code == 200
        assert response.json()["bio"] == "We answer fast"
        assert response.json()["timezone"] == "Europe/Berlin"

    def test_employee_cannot_update(self, employee_client):
        response = employee_client.patch("/api/v1/company/update", json={"bio": "x"})
        assert response.status_code == 403

    def test_subdomain_taken_by_other_company(self, admin_client, other_company):
        response = admin_client.patch("/api/v1/company/update", json={"subdomain": "globex"})
        assert response.status_code == 409
        assert response.json()["detail"] == "Subdomain already exists"

    def test_status_cannot_be_changed(self, admin_client, test_company, db_session):
        admin_client.patch("/api/v1/company/update", json={"status": "SUSPENDED"})
        db_session.refresh(test_company)
        assert test_company.status == "ACTIVE"


class TestCompanyDelete:

    def test_owner_deletes_company_and_its_rows(self, owner_client, test_company, employee_user, db_session):
        company_id = test_company.id
        db_session.add(Department(company_id=company_id, department_name="Support"))
        db_session.commit()

        response = owner_client.delete("/api/v1/company/delete")

        assert response.status_code == 200
        assert response.json() == {"id": str(company_id), "deleted": True}
        db_session.expire_all()
        assert db_session.query(Company).filter(Company.id == company_id).first() is None
        assert db_session.query(User).filter(User.company_id == company_id).count() == 0
        assert db_session.query(Department).filter(Department.company_id == company_id).count() == 0

    def test_delete_logs_acting_owner(self, owner_client, owner_user, caplog):
        caplog.set_level(logging.WARNING, logger="convohub.company")
        owner_id = owner_user.id

        response = owner_client.delete("/api/v1/company/delete")

        assert response.status_code == 200
        record = next(r for r in caplog.records if r.getMessage() == "Company deleted")
        assert record.user_id == str(owner_id)

    def test_admin_cannot_delete(self, admin_client):
        assert admin_client.delete("/api/v1/company/delete").status_code == 403

    def test_other_company_untouched(self, owner_client, other_admin, other_company, db_session):
        owner_client.delete("/api/v1/company/delete")
        db_session.expire_all()
        assert db_session.query(Company).filter(Company.id == other_company.id).first() is not None
