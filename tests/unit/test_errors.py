"""Unit tests for AppError hierarchy."""

import pytest

from errors import (
    AppError,
    CallableError,
    ConfigurationError,
    ForbiddenError,
    LowScoreError,
    MethodNotAllowedError,
    MissingPayloadError,
    MissingTokenError,
    SubmissionWriteError,
    UpstreamError,
    ValidationError,
    VerificationRejectedError,
    VerificationUnavailableError,
)


class TestAppErrorSubclasses:
    @pytest.mark.parametrize(
        "cls, status_code, error_code, reason",
        [
            (MissingTokenError, 400, "missing_recaptcha_token", "missing_token"),
            (MissingPayloadError, 400, "missing_payload", "missing_payload"),
            (ConfigurationError, 500, "server_not_configured", "server_not_configured"),
            (VerificationRejectedError, 403, "recaptcha_failed", "verification_failed"),
            (LowScoreError, 403, "recaptcha_failed", "low_score"),
            (VerificationUnavailableError, 500, "internal", "internal"),
            (SubmissionWriteError, 500, "internal", "internal"),
            (MethodNotAllowedError, 405, "method_not_allowed", "method_not_allowed"),
        ],
    )
    def test_codes(self, cls, status_code, error_code, reason):
        e = cls("boom")
        assert e.status_code == status_code
        assert e.error_code == error_code
        assert e.reason == reason
        assert e.message == "boom"

    def test_hierarchy(self):
        assert issubclass(MissingTokenError, ValidationError)
        assert issubclass(LowScoreError, ForbiddenError)
        assert issubclass(SubmissionWriteError, UpstreamError)
        assert issubclass(UpstreamError, AppError)

    def test_client_errors_define_their_own_code(self):
        # The 400 base carries only the status; every raised subclass names its code
        assert "error_code" not in vars(ValidationError)
        for cls in (MissingTokenError, MissingPayloadError):
            assert "error_code" in vars(cls)
            assert cls("x").to_dict()["error"] != AppError.error_code


class TestAppErrorToDict:
    def test_basic(self):
        assert MissingPayloadError("Missing payload").to_dict() == {
            "error": "missing_payload"
        }

    def test_details_included(self):
        e = VerificationRejectedError("failed", details={"success": False})
        assert e.to_dict() == {"error": "recaptcha_failed", "details": {"success": False}}


class TestCallableError:
    @pytest.mark.parametrize(
        "code, status_code",
        [
            ("invalid-argument", 400),
            ("failed-precondition", 400),
            ("permission-denied", 403),
            ("internal", 500),
            ("unknown-code", 500),
        ],
    )
    def test_status_mapping(self, code, status_code):
        assert CallableError(code, "msg").status_code == status_code

    def test_to_dict(self):
        e = CallableError("invalid-argument", "Missing payload.")
        assert e.to_dict() == {
            "error": {"status": "invalid-argument", "message": "Missing payload."}
        }

    def test_to_dict_with_details(self):
        e = CallableError("permission-denied", "nope", details={"score": 0.1})
        assert e.to_dict()["error"]["details"] == {"score": 0.1}
