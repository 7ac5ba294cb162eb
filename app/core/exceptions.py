"""
Domain exceptions for the Campus Events API
===========================================

Every error raised by a service carries a stable ``kind`` (what sort of
failure it is) and a ``code`` (which failure exactly), so the UI can react
differently to, say, an unknown member email and a store outage.

Usage:
    from app.core.exceptions import MemberNotFoundError

    if not profile:
        raise MemberNotFoundError(email)

The handler registered in ``app.main`` renders these as::

    {"error": {"kind": ..., "code": ..., "message": ..., "details": {...}}}
"""

from typing import Optional, Any, Dict


class CampusEventsError(Exception):
    """Base exception for all Campus Events errors"""

    kind = "internal_error"
    status_code = 500

    def __init__(
        self,
        message: str,
        code: str = "INTERNAL_ERROR",
        details: Optional[Dict[str, Any]] = None
    ):
        self.message = message
        self.code = code
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "kind": self.kind,
            "code": self.code,
            "message": self.message,
            "details": self.details
        }


# ============================================
# Validation Errors (400)
# ============================================

class ValidationError(CampusEventsError):
    """Input validation failed"""

    kind = "validation_error"
    status_code = 400

    def __init__(self, message: str, field: Optional[str] = None, code: str = "VALIDATION_ERROR"):
        details = {"field": field} if field else {}
        super().__init__(message, code=code, details=details)


class EventNotOpenError(ValidationError):
    """Event is missing or not accepting stall registrations"""

    def __init__(self, event_id: str):
        super().__init__(
            "This event is not open for stall registration",
            field="event_id",
            code="EVENT_NOT_OPEN"
        )
        self.details["event_id"] = event_id


class SelfReferenceError(ValidationError):
    """Leader listed themselves as a team member"""

    def __init__(self, email: str):
        super().__init__(
            "You cannot add yourself as a team member.",
            field="member_emails",
            code="SELF_REFERENCE"
        )
        self.details["email"] = email


class DuplicateMemberError(ValidationError):
    """Same member email submitted more than once"""

    def __init__(self, email: str):
        super().__init__(
            "Member emails must be unique",
            field="member_emails",
            code="DUPLICATE_MEMBER"
        )
        self.details["email"] = email


class TeamTooLargeError(ValidationError):
    """More members than a stall can hold"""

    def __init__(self, submitted: int, limit: int):
        super().__init__(
            f"A stall team can have at most {limit} members besides the leader",
            field="member_emails",
            code="TEAM_TOO_LARGE"
        )
        self.details.update({"submitted": submitted, "limit": limit})


# ============================================
# Authentication & Authorization Errors
# ============================================

class AuthenticationError(CampusEventsError):
    """Caller could not be identified"""

    kind = "unauthorized"
    status_code = 401

    def __init__(self, message: str = "Could not validate credentials"):
        super().__init__(message, code="INVALID_TOKEN")


class ForbiddenError(CampusEventsError):
    """Caller lacks the role required for this action"""

    kind = "forbidden"
    status_code = 403

    def __init__(self, message: str = "You do not have permission to perform this action"):
        super().__init__(message, code="FORBIDDEN")


# ============================================
# Resource Errors (404)
# ============================================

class NotFoundError(CampusEventsError):
    """Base class for not found errors"""

    kind = "not_found"
    status_code = 404

    def __init__(self, resource_type: str, resource_id: str):
        super().__init__(
            f"{resource_type} with ID '{resource_id}' not found",
            code=f"{resource_type.upper()}_NOT_FOUND",
            details={"resource_type": resource_type, "resource_id": resource_id}
        )


class EventNotFoundError(NotFoundError):
    def __init__(self, event_id: str):
        super().__init__("Event", event_id)


class StallNotFoundError(NotFoundError):
    def __init__(self, stall_id: str):
        super().__init__("Stall", stall_id)


class ProfileNotFoundError(NotFoundError):
    def __init__(self, profile_id: str):
        super().__init__("Profile", profile_id)


class FormNotFoundError(NotFoundError):
    def __init__(self, form_id: str):
        super().__init__("Form", form_id)


class MemberNotFoundError(CampusEventsError):
    """A submitted member email has no account"""

    kind = "not_found"
    status_code = 404

    def __init__(self, email: str):
        super().__init__(
            f"Member with email {email} not found. Please ensure they have an account.",
            code="MEMBER_NOT_FOUND",
            details={"email": email}
        )


# ============================================
# State Errors (409)
# ============================================

class ConflictError(CampusEventsError):
    """Request conflicts with the current state of a resource"""

    kind = "conflict"
    status_code = 409

    def __init__(self, message: str, code: str = "CONFLICT", details: Optional[Dict[str, Any]] = None):
        super().__init__(message, code=code, details=details)


class StallAlreadyDecidedError(ConflictError):
    def __init__(self, stall_id: str, status: str):
        super().__init__(
            f"Stall has already been {status}",
            code="STALL_ALREADY_DECIDED",
            details={"stall_id": stall_id, "status": status}
        )


class StallNotApprovedError(ConflictError):
    def __init__(self, stall_id: str, status: str):
        super().__init__(
            "Stall must be approved first",
            code="STALL_NOT_APPROVED",
            details={"stall_id": stall_id, "status": status}
        )


class StallNumberTakenError(ConflictError):
    def __init__(self, event_id: str, number: int):
        super().__init__(
            f"Stall number {number} is already assigned in this event",
            code="STALL_NUMBER_TAKEN",
            details={"event_id": event_id, "stall_number": number}
        )


# ============================================
# External Service Errors (502)
# ============================================

class ExternalServiceError(CampusEventsError):
    """Database, object store or mail server call failed"""

    kind = "external_service_error"
    status_code = 502

    def __init__(self, service: str, message: str = "Service temporarily unavailable, please try again"):
        super().__init__(
            message,
            code="EXTERNAL_SERVICE_ERROR",
            details={"service": service}
        )
