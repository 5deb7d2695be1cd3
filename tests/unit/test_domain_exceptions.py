"""Tests for domain exceptions (error_code, message, details) and their HTTP mapping."""

from app.core.exception_handlers import status_for_error_code
from app.domain.exceptions import (
    AgencyPlatformException,
    AuthenticationException,
    AuthorizationException,
    ConflictException,
    ExternalProviderException,
    ResourceNotFoundException,
    SqlNotConfiguredException,
    ValidationException,
)


def test_base_exception_default_error_code() -> None:
    """Base exception uses class name as error_code when not provided."""
    exc = AgencyPlatformException("Something failed")
    assert exc.message == "Something failed"
    assert exc.error_code == "AgencyPlatformException"
    assert exc.details == {}


def test_to_dict_omits_empty_details() -> None:
    exc = AgencyPlatformException("Oops", error_code="CUSTOM")
    assert exc.to_dict() == {"error": "CUSTOM", "message": "Oops"}


def test_to_dict_includes_details() -> None:
    exc = AgencyPlatformException("Oops", error_code="CUSTOM", details={"key": "value"})
    assert exc.to_dict() == {"error": "CUSTOM", "message": "Oops", "details": {"key": "value"}}


def test_validation_exception() -> None:
    """ValidationException sets VALIDATION_ERROR and optional field in details."""
    exc = ValidationException("Invalid format", field="slug")
    assert exc.error_code == "VALIDATION_ERROR"
    assert exc.details == {"field": "slug"}
    assert ValidationException("Invalid").details == {}


def test_authentication_exception() -> None:
    exc = AuthenticationException()
    assert exc.message == "Authentication failed"
    assert exc.error_code == "AUTHENTICATION_ERROR"


def test_authorization_exception_names_action() -> None:
    """AuthorizationException carries the denied action in message and details."""
    exc = AuthorizationException(action="packages:create")
    assert exc.error_code == "PERMISSION_DENIED"
    assert exc.message == "Permission denied: packages:create"
    assert exc.details == {"action": "packages:create"}


def test_authorization_exception_without_action() -> None:
    exc = AuthorizationException()
    assert exc.message == "Permission denied"
    assert exc.details == {}


def test_resource_not_found_exception() -> None:
    exc = ResourceNotFoundException("invoice", "inv-1")
    assert exc.error_code == "RESOURCE_NOT_FOUND"
    assert exc.message == "invoice not found: inv-1"
    assert exc.details == {"resource_type": "invoice", "resource_id": "inv-1"}


def test_conflict_exception_keeps_keyword_details() -> None:
    exc = ConflictException("Already scheduled", agency_id="a1", state="scheduled")
    assert exc.error_code == "CONFLICT"
    assert exc.details == {"agency_id": "a1", "state": "scheduled"}


def test_external_provider_exception_is_generic() -> None:
    exc = ExternalProviderException()
    assert exc.error_code == "EXTERNAL_PROVIDER_ERROR"
    assert exc.message == "Payment provider request failed"


def test_sql_not_configured_exception() -> None:
    exc = SqlNotConfiguredException()
    assert exc.error_code == "SERVICE_UNAVAILABLE"
    assert "SQL database" in exc.message


def test_status_for_error_code() -> None:
    """Each domain error code maps to its HTTP status; unknown codes are 400."""
    assert status_for_error_code("VALIDATION_ERROR") == 400
    assert status_for_error_code("AUTHENTICATION_ERROR") == 401
    assert status_for_error_code("PERMISSION_DENIED") == 403
    assert status_for_error_code("RESOURCE_NOT_FOUND") == 404
    assert status_for_error_code("CONFLICT") == 409
    assert status_for_error_code("EXTERNAL_PROVIDER_ERROR") == 502
    assert status_for_error_code("SERVICE_UNAVAILABLE") == 503
    assert status_for_error_code("SOMETHING_ELSE") == 400
