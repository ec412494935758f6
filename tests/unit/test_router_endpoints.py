"""Tests for API endpoints."""

from datetime import datetime, timezone
from unittest.mock import AsyncMock, patch

import pytest

from src.services.verification import FaceMatchResult, FaceMatchServiceError

from tests.helpers import JPEG_URI, PNG_URI

RUN_AGENT = "src.services.verification.verifier.run_face_match_agent"


def _register(client, name="Asha", registration_type="Loan"):
    response = client.post("/api/users/", json={
        "name": name,
        "contact": "9876543210",
        "id_proof": "AADHAAR-1234",
        "face_image": JPEG_URI,
        "registration_type": registration_type,
    })
    assert response.status_code == 201
    return response.json()


# ==========================================
#  HEALTH
# ==========================================


def test_health(client):
    response = client.get("/api/health")
    assert response.status_code == 200
    assert response.json()["status"] == "healthy"


# ==========================================
#  POST /api/verification/face-match
# ==========================================


@patch(RUN_AGENT, new_callable=AsyncMock)
def test_face_match_success(mock_agent, client):
    mock_agent.return_value = FaceMatchResult(is_match=True, confidence=0.92)
    response = client.post("/api/verification/face-match", json={
        "selfieDataUri": PNG_URI,
        "storedImageDataUri": JPEG_URI,
    })
    assert response.status_code == 200
    assert response.json() == {"isMatch": True, "confidence": 0.92}


@patch(RUN_AGENT, new_callable=AsyncMock)
def test_face_match_missing_field(mock_agent, client):
    response = client.post("/api/verification/face-match", json={"selfieDataUri": PNG_URI})
    assert response.status_code == 200
    assert response.json() == {"error": "Invalid input."}
    mock_agent.assert_not_awaited()


@patch(RUN_AGENT, new_callable=AsyncMock)
def test_face_match_empty_body(mock_agent, client):
    response = client.post("/api/verification/face-match")
    assert response.json() == {"error": "Invalid input."}
    mock_agent.assert_not_awaited()


@pytest.mark.parametrize("body", [b'{"selfieDataUri": ', b"not json", b"\xff\xfe"])
@patch(RUN_AGENT, new_callable=AsyncMock)
def test_face_match_malformed_json_body(mock_agent, client, body):
    response = client.post(
        "/api/verification/face-match",
        content=body,
        headers={"Content-Type": "application/json"},
    )
    assert response.status_code == 200
    assert response.json() == {"error": "Invalid input."}
    mock_agent.assert_not_awaited()


@patch(RUN_AGENT, new_callable=AsyncMock)
def test_face_match_service_error_is_generic(mock_agent, client):
    mock_agent.side_effect = FaceMatchServiceError("401 Unauthorized: bad key")
    response = client.post("/api/verification/face-match", json={
        "selfieDataUri": PNG_URI,
        "storedImageDataUri": JPEG_URI,
    })
    assert response.status_code == 200
    assert response.json() == {"error": "An unexpected error occurred during verification."}


# ==========================================
#  USERS
# ==========================================


def test_register_and_get_user(client):
    user = _register(client)
    assert user["id"] == "user1"

    response = client.get(f"/api/users/{user['id']}")
    assert response.status_code == 200
    assert response.json()["name"] == "Asha"


def test_register_user_missing_field(client):
    response = client.post("/api/users/", json={"name": "Asha"})
    assert response.status_code == 422


def test_get_unknown_user(client):
    response = client.get("/api/users/user404")
    assert response.status_code == 404


def test_update_and_delete_user(client):
    user = _register(client)
    response = client.patch(f"/api/users/{user['id']}", json={"name": "Asha Devi"})
    assert response.status_code == 200
    assert response.json()["name"] == "Asha Devi"

    response = client.delete(f"/api/users/{user['id']}")
    assert response.json() == {"status": "success", "id": user["id"]}
    assert client.get("/api/users/").json() == []


# ==========================================
#  LOANS AND VAULT
# ==========================================


def test_quote_loan(client):
    response = client.post("/api/loans/quote", json={
        "amount": 20000,
        "loan_type": "Loan",
        "payment_frequency": "Weekly",
    })
    assert response.status_code == 200
    data = response.json()
    assert data["interest"] == 2000
    assert data["disbursed_amount"] == 18000


def test_loan_lifecycle(client):
    user = _register(client)
    response = client.post(f"/api/users/{user['id']}/loans", json={
        "amount": 10000,
        "loan_type": "EMI",
        "payment_frequency": "Monthly",
    })
    assert response.status_code == 201
    loan = response.json()
    assert loan["remaining_balance"] == 10000

    url = f"/api/users/{user['id']}/loans/{loan['id']}/repayments"
    response = client.post(url, json={"amount": 12000})
    assert response.status_code == 400

    response = client.post(url, json={"amount": 10000})
    assert response.status_code == 200
    assert response.json()["status"] == "Paid"

    vault = client.get("/api/vault").json()
    assert vault["balance"] == 101200
    assert vault["total_interest_earned"] == 1200

    txns = client.get("/api/transactions").json()
    assert [tx["type"] for tx in txns] == ["Repayment", "Disbursement"]


def test_dashboard_and_reports(client):
    user = _register(client)
    client.post(f"/api/users/{user['id']}/loans", json={
        "amount": 5000,
        "loan_type": "Loan",
        "payment_frequency": "Daily",
    })

    dashboard = client.get("/api/dashboard").json()
    assert dashboard["vault"]["total_loans_given"] == 4500
    assert dashboard["users"][0]["outstanding_balance"] == 5000

    rows = client.get("/api/reports/loans").json()
    assert len(rows) == 1
    assert rows[0]["user_name"] == "Asha"
    assert client.get("/api/reports/diwali-fund").json() == []


# ==========================================
#  DIWALI FUND
# ==========================================


def test_diwali_fund_quote_rejects_bad_contribution(client):
    response = client.post("/api/diwali-fund/quote", json={"contribution": 42, "frequency": "Weekly"})
    assert response.status_code == 400


def test_diwali_fund_unknown_participant(client):
    response = client.post("/api/diwali-fund/user404/contributions", json={"amount": 100})
    assert response.status_code == 404


# ==========================================
#  USER VERIFICATION
# ==========================================


@patch(RUN_AGENT, new_callable=AsyncMock)
def test_user_verification_flow(mock_agent, client):
    mock_agent.return_value = FaceMatchResult(is_match=False, confidence=0.1)
    user = _register(client)
    url = f"/api/users/{user['id']}/verification"

    assert client.get(url).json()["state"] == "not_started"

    response = client.post(url, json={"selfieDataUri": PNG_URI})
    assert response.status_code == 200
    data = response.json()
    assert data["state"] == "completed"
    assert data["outcome"] == {"isMatch": False, "confidence": 0.1}

    assert client.delete(url).status_code == 200
    assert client.get(url).json()["state"] == "not_started"


def test_user_verification_pending_conflict(client, attempts):
    user = _register(client)
    attempts.begin(user["id"])
    response = client.post(
        f"/api/users/{user['id']}/verification", json={"selfieDataUri": PNG_URI}
    )
    assert response.status_code == 409


@pytest.mark.parametrize("method", ["get", "delete"])
def test_user_verification_unknown_user(client, method):
    response = getattr(client, method)("/api/users/user404/verification")
    assert response.status_code == 404


@patch(RUN_AGENT, new_callable=AsyncMock)
def test_user_verification_malformed_json_body(mock_agent, client):
    user = _register(client)
    response = client.post(
        f"/api/users/{user['id']}/verification",
        content=b'{"selfieDataUri": ',
        headers={"Content-Type": "application/json"},
    )
    assert response.status_code == 200
    data = response.json()
    assert data["state"] == "completed"
    assert data["outcome"] == {"error": "Invalid input."}
    mock_agent.assert_not_awaited()


@patch("src.services.diwali_fund.service.utc_now", return_value=datetime(2026, 3, 1, tzinfo=timezone.utc))
def test_diwali_fund_withdrawal_returns_payout(mock_now, client):
    user = _register(client, name="Meena", registration_type="Diwali Fund")
    response = client.post(f"/api/diwali-fund/{user['id']}", json={"contribution": 100, "frequency": "Weekly"})
    assert response.status_code == 201
    client.post(f"/api/diwali-fund/{user['id']}/contributions", json={"amount": 100})

    response = client.delete(f"/api/diwali-fund/{user['id']}")
    assert response.status_code == 200
    data = response.json()
    assert data["early"] is True
    assert data["deduction"] == 10
    assert data["payout"] == 90
    assert client.get(f"/api/users/{user['id']}").status_code == 404
