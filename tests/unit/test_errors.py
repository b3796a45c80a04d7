"""
Error codes, classification and the seeding exception hierarchy.
"""

import pytest

from core.errors import (
    ErrorCode,
    ErrorClassification,
    is_retryable,
    get_error_classification,
    classify_status_code,
    SeedingError,
    ConnectionResolutionError,
    NamespaceEnsureError,
    ItemWriteError,
    CancellationError,
    LifecycleTransitionError,
)


class TestClassification:
    @pytest.mark.parametrize("code", list(ErrorCode), ids=[c.value for c in ErrorCode])
    def test_every_code_is_classified(self, code):
        assert isinstance(get_error_classification(code), ErrorClassification)

    @pytest.mark.parametrize("code", [
        ErrorCode.TOPOLOGY_INCOMPLETE,
        ErrorCode.CONNECTION_STRING_MISSING,
        ErrorCode.AUTHORIZATION_FAILED,
        ErrorCode.CANCELLED,
        ErrorCode.ITEM_CONFLICT,
    ])
    def test_permanent_codes_not_retryable(self, code):
        assert is_retryable(code) is False

    @pytest.mark.parametrize("code", [
        ErrorCode.CONNECTION_FAILED,
        ErrorCode.SERVICE_UNAVAILABLE,
        ErrorCode.THROTTLED,
        ErrorCode.CONTAINER_ENSURE_FAILED,
    ])
    def test_transient_codes_retryable(self, code):
        assert is_retryable(code) is True


class TestClassifyStatusCode:
    @pytest.mark.parametrize("status,expected", [
        (401, ErrorCode.AUTHORIZATION_FAILED),
        (403, ErrorCode.AUTHORIZATION_FAILED),
        (409, ErrorCode.ITEM_CONFLICT),
        (400, ErrorCode.ITEM_INVALID),
        (413, ErrorCode.ITEM_INVALID),
        (429, ErrorCode.THROTTLED),
        (503, ErrorCode.SERVICE_UNAVAILABLE),
    ])
    def test_mapped(self, status, expected):
        assert classify_status_code(status, ErrorCode.ITEM_WRITE_FAILED) == expected

    @pytest.mark.parametrize("status", [None, 404, 500])
    def test_falls_back_to_default(self, status):
        assert classify_status_code(status, ErrorCode.DATABASE_ENSURE_FAILED) == ErrorCode.DATABASE_ENSURE_FAILED


class TestSeedingErrors:
    @pytest.mark.parametrize("cls,code,phase", [
        (ConnectionResolutionError, ErrorCode.CONNECTION_FAILED, "connect"),
        (NamespaceEnsureError, ErrorCode.CONTAINER_ENSURE_FAILED, "ensure"),
        (ItemWriteError, ErrorCode.ITEM_WRITE_FAILED, "import"),
        (LifecycleTransitionError, ErrorCode.INVALID_TRANSITION, "lifecycle"),
    ])
    def test_defaults(self, cls, code, phase):
        error = cls("msg", resource_name="res")
        assert isinstance(error, SeedingError)
        assert error.error_code == code
        assert error.phase == phase

    def test_cancellation_takes_caller_phase(self):
        error = CancellationError("stop", resource_name="res", phase="ensure")
        assert error.phase == "ensure"
        assert error.retryable is False

    def test_str_includes_resource_and_phase(self):
        assert str(ItemWriteError("bad", resource_name="cdbimport")) == "[cdbimport:import] bad"

    def test_str_without_resource(self):
        assert str(SeedingError("plain")) == "plain"

    def test_to_dict(self):
        error = ItemWriteError("bad", resource_name="r", record_id="id-1", error_code=ErrorCode.THROTTLED)
        d = error.to_dict()
        assert d == {
            "error": "THROTTLED",
            "error_type": "ItemWriteError",
            "message": "bad",
            "phase": "import",
            "retryable": True,
            "resource_name": "r",
            "record_id": "id-1",
        }
