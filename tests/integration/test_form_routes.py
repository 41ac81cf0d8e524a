"""Integration tests for POST /api/form/submit."""

import pytest

from errors import SubmissionWriteError, VerificationUnavailableError

URL = "/api/form/submit"
VALID_BODY = {"token": "valid", "payload": {"name": "Alice", "email": "a@x.com"}}


class TestSubmitForm:
    def test_success(self, client, verifier, store):
        verifier.response = {"success": True, "score": 0.9}
        resp = client.post(URL, json=VALID_BODY)
        assert resp.status_code == 200
        assert resp.json() == {"ok": True}
        assert store.records[0]["name"] == "Alice"
        assert "X-Request-ID" in resp.headers

    def test_missing_token(self, client):
        resp = client.post(URL, json={"payload": {"a": 1}})
        assert resp.status_code == 400
        assert resp.json() == {"error": "missing_recaptcha_token"}

    def test_missing_payload(self, client):
        resp = client.post(URL, json={"token": "t", "payload": "text"})
        assert resp.status_code == 400
        assert resp.json() == {"error": "missing_payload"}

    def test_non_json_body_is_missing_token(self, client):
        resp = client.post(URL, content=b"not json", headers={"Content-Type": "text/plain"})
        assert resp.status_code == 400
        assert resp.json() == {"error": "missing_recaptcha_token"}

    def test_server_not_configured(self, unconfigured_client):
        resp = unconfigured_client.post(URL, json=VALID_BODY)
        assert resp.status_code == 500
        assert resp.json() == {"error": "server_not_configured"}

    def test_rejected_includes_details(self, client, verifier, store):
        verifier.response = {"success": False, "error-codes": ["invalid-input-response"]}
        resp = client.post(URL, json={"token": "bad", "payload": {"a": 1}})
        assert resp.status_code == 400
        assert resp.json() == {
            "error": "recaptcha_failed",
            "details": {"success": False, "error-codes": ["invalid-input-response"]},
        }
        assert store.records == []

    def test_low_score(self, client, verifier):
        verifier.response = {"success": True, "score": 0.2}
        resp = client.post(URL, json=VALID_BODY)
        assert resp.status_code == 400
        assert resp.json()["error"] == "recaptcha_failed"

    def test_provider_unavailable(self, client, verifier):
        verifier.error = VerificationUnavailableError("down")
        resp = client.post(URL, json=VALID_BODY)
        assert resp.status_code == 500
        assert resp.json() == {"error": "internal"}

    def test_write_failure(self, client, store):
        store.error = SubmissionWriteError("denied")
        resp = client.post(URL, json=VALID_BODY)
        assert resp.status_code == 500
        assert resp.json() == {"error": "internal"}

    def test_client_ip_forwarded(self, client, verifier):
        client.post(URL, json=VALID_BODY, headers={"X-Forwarded-For": "203.0.113.5"})
        assert verifier.calls == [("valid", "203.0.113.5")]

    @pytest.mark.parametrize("method", ["GET", "PUT", "DELETE", "PATCH"])
    def test_other_methods_not_allowed(self, client, verifier, method):
        resp = client.request(method, URL)
        assert resp.status_code == 405
        assert resp.headers["Allow"] == "POST"
        assert verifier.calls == []
