"""Tests for compliance override management."""
from datetime import timedelta

import pytest

from hrcompliance.core.time import utc_now
from hrcompliance.models import AuditLog, ComplianceOverride


def _expiry(days=7):
    return (utc_now() + timedelta(days=days)).isoformat()


class TestCreateOverride:

    @pytest.fixture
    def payload(self, employee):
        return {
            "employeeId": employee.employee_id,
            "reason": "Police check renewal lodged, receipt sighted",
            "expiresAt": _expiry(),
            "contextType": "shift",
            "blockedCertifications": [
                {"type": "police_check", "status": "expired", "expiryDate": "2026-01-01"}
            ],
        }

    def test_director_can_create(self, client, director_headers, director_user, employee, payload, db_session):
        response = client.post("/compliance/overrides", json=payload, headers=director_headers)
        assert response.status_code == 201
        data = response.json()
        assert data["employeeId"] == employee.employee_id
        assert data["organisationId"] == employee.organisation_id
        assert data["isActive"] is True
        assert data["contextType"] == "shift"
        assert data["overrideByName"] == "Dana Director"
        assert data["overrideByEmail"] == "director@example.com"
        assert data["blockedCertifications"] == [
            {"type": "police_check", "status": "expired", "expiryDate": "2026-01-01"}
        ]

        audit = db_session.query(AuditLog).filter(
            AuditLog.action == "COMPLIANCE_OVERRIDE_CREATE"
        ).one()
        assert audit.entity_id == employee.employee_id
        assert audit.user_id == director_user.user_id
        assert audit.changes["override_id"] == data["overrideId"]

    def test_admin_can_create(self, client, admin_headers, payload):
        response = client.post("/compliance/overrides", json=payload, headers=admin_headers)
        assert response.status_code == 201

    def test_staff_forbidden(self, client, auth_headers, payload):
        response = client.post("/compliance/overrides", json=payload, headers=auth_headers)
        assert response.status_code == 403

    def test_unauthenticated(self, client, payload):
        response = client.post("/compliance/overrides", json=payload)
        assert response.status_code == 401

    def test_reason_too_short(self, client, director_headers, payload):
        payload["reason"] = "   short   "
        response = client.post("/compliance/overrides", json=payload, headers=director_headers)
        assert response.status_code == 422

    def test_expiry_beyond_fourteen_days(self, client, director_headers, payload):
        payload["expiresAt"] = _expiry(days=15)
        response = client.post("/compliance/overrides", json=payload, headers=director_headers)
        assert response.status_code == 400
        assert "14 days" in response.json()["detail"]

    def test_expiry_in_past(self, client, director_headers, payload):
        payload["expiresAt"] = _expiry(days=-1)
        response = client.post("/compliance/overrides", json=payload, headers=director_headers)
        assert response.status_code == 400

    def test_unknown_employee(self, client, director_headers, payload):
        payload["employeeId"] = "00000000-0000-0000-0000-000000000000"
        response = client.post("/compliance/overrides", json=payload, headers=director_headers)
        assert response.status_code == 404

    def test_created_override_unblocks_can_assign(self, client, director_headers, auth_headers, employee, payload):
        assert client.post("/compliance/overrides", json=payload, headers=director_headers).status_code == 201

        data = client.post(
            "/compliance/can-assign",
            json={"employeeId": employee.employee_id, "context": {"contextType": "shift"}},
            headers=auth_headers
        ).json()
        assert data["allowed"] is True
        assert data["result"]["compliant"] is False


class TestRevokeOverride:

    def test_revoke(self, client, director_headers, director_user, employee, add_override, db_session):
        override = add_override(employee, director_user)
        response = client.post(
            f"/compliance/overrides/{override.override_id}/revoke", headers=director_headers
        )
        assert response.status_code == 200
        data = response.json()
        assert data["isActive"] is False
        assert data["revokedByUserId"] == director_user.user_id
        assert data["revokedAt"].endswith("Z")

        assert db_session.query(AuditLog).filter(
            AuditLog.action == "COMPLIANCE_OVERRIDE_REVOKE"
        ).count() == 1

    def test_revoked_override_no_longer_reported(
        self, client, director_headers, auth_headers, director_user, employee, add_override
    ):
        override = add_override(employee, director_user)
        client.post(f"/compliance/overrides/{override.override_id}/revoke", headers=director_headers)

        data = client.post(
            "/compliance/evaluate", json={"employeeId": employee.employee_id}, headers=auth_headers
        ).json()
        assert data["overrideActive"] is False

    def test_revoke_twice(self, client, director_headers, director_user, employee, add_override):
        override = add_override(employee, director_user, is_active=False)
        response = client.post(
            f"/compliance/overrides/{override.override_id}/revoke", headers=director_headers
        )
        assert response.status_code == 400

    def test_revoke_unknown(self, client, director_headers):
        response = client.post("/compliance/overrides/nope/revoke", headers=director_headers)
        assert response.status_code == 404

    def test_staff_cannot_revoke(self, client, auth_headers, director_user, employee, add_override):
        override = add_override(employee, director_user)
        response = client.post(
            f"/compliance/overrides/{override.override_id}/revoke", headers=auth_headers
        )
        assert response.status_code == 403


class TestListAndExpire:

    def test_lists_live_overrides_newest_first(self, client, admin_headers, director_user, employee, add_override):
        older = add_override(employee, director_user, created_ago=timedelta(days=2))
        newer = add_override(employee, director_user, created_ago=timedelta(hours=3))
        add_override(employee, director_user, is_active=False)
        add_override(employee, director_user, expires_in=timedelta(hours=-2), created_ago=timedelta(days=4))

        response = client.get(
            f"/compliance/employees/{employee.employee_id}/overrides", headers=admin_headers
        )
        assert response.status_code == 200
        assert [o["overrideId"] for o in response.json()] == [newer.override_id, older.override_id]

    def test_expire_endpoint(self, client, admin_headers, director_user, employee, add_override, db_session):
        stale = add_override(employee, director_user, expires_in=timedelta(minutes=-5), created_ago=timedelta(days=2))
        live = add_override(employee, director_user)

        response = client.post("/compliance/overrides/expire", headers=admin_headers)
        assert response.status_code == 200
        assert response.json() == {"lapsed": 1}

        db_session.expire_all()
        assert db_session.get(ComplianceOverride, stale.override_id).is_active is False
        assert db_session.get(ComplianceOverride, live.override_id).is_active is True

    def test_expire_requires_manager(self, client, auth_headers):
        response = client.post("/compliance/overrides/expire", headers=auth_headers)
        assert response.status_code == 403
