"""Per-operation authorization: role checks and ownership checks.

Each check returns None when allowed, or a Failure:
- unauthenticated: no (or unresolvable) identity
- forbidden: wrong role, or not the owner of the application / hackathon
"""
from __future__ import annotations

import logging

from .types import Application, Failure, Hackathon, Identity, Role, failure

logger = logging.getLogger(__name__)

# Role required by each service operation. Operations absent from this table
# (application details, own results) are open to either role and rely on the
# ownership check alone.
OPERATION_ROLES: dict[str, Role] = {
    "apply": Role.APPLICANT,
    "get_my_applications": Role.APPLICANT,
    "submit_phase": Role.APPLICANT,
    "review_phase": Role.INDUSTRY,
    "request_reupload": Role.INDUSTRY,
    "reject": Role.INDUSTRY,
    "get_applications_by_hackathon": Role.INDUSTRY,
    "finalize_results": Role.INDUSTRY,
    "publish_showcase": Role.INDUSTRY,
    "get_hackathon_results": Role.INDUSTRY,
    "update_rank": Role.INDUSTRY,
    "delete_application": Role.INDUSTRY,
}

_ROLE_DENIALS = {
    Role.APPLICANT: "Only applicants can perform this action.",
    Role.INDUSTRY: "Only industry users can perform this action.",
}


def _forbidden(operation: str, identity: Identity, reason: str) -> Failure:
    logger.info(
        "Access denied for %s on %s: %s",
        identity.id,
        operation,
        reason,
        extra={
            "event": "access.forbidden",
            "operation": operation,
            "identity_id": identity.id,
        },
    )
    return failure("forbidden", reason)


def require_identity(identity: Identity | None, operation: str) -> Failure | None:
    if identity is None or not identity.id:
        logger.info(
            "Unauthenticated call to %s",
            operation,
            extra={"event": "access.unauthenticated", "operation": operation},
        )
        return failure("unauthenticated", "Authentication failed. Please log in again.")
    return None


def require_role(identity: Identity | None, operation: str) -> Failure | None:
    """Check identity presence and the role listed in OPERATION_ROLES."""
    missing = require_identity(identity, operation)
    if missing is not None:
        return missing
    required = OPERATION_ROLES.get(operation)
    if required is None or identity.role == required:
        return None
    return _forbidden(
        operation,
        identity,
        f"{_ROLE_DENIALS[required]} You are: {identity.role.value}",
    )


def is_applicant_owner(identity: Identity, application: Application) -> bool:
    return application.applicant_id == identity.id


def is_hackathon_owner(identity: Identity, hackathon: Hackathon | None) -> bool:
    return hackathon is not None and hackathon.created_by_industry_id == identity.id


def require_applicant_owner(
    identity: Identity, application: Application, operation: str
) -> Failure | None:
    if identity.role == Role.APPLICANT and is_applicant_owner(identity, application):
        return None
    return _forbidden(operation, identity, "You can only access your own application.")


def require_hackathon_owner(
    identity: Identity, hackathon: Hackathon | None, operation: str
) -> Failure | None:
    if identity.role == Role.INDUSTRY and is_hackathon_owner(identity, hackathon):
        return None
    return _forbidden(
        operation, identity, "You can only manage applications for your own hackathons."
    )


def require_viewer(
    identity: Identity,
    application: Application,
    hackathon: Hackathon | None,
    operation: str,
) -> Failure | None:
    """Applicant who owns the application, or industry user who owns the hackathon."""
    if identity.role == Role.APPLICANT and is_applicant_owner(identity, application):
        return None
    if identity.role == Role.INDUSTRY and is_hackathon_owner(identity, hackathon):
        return None
    return _forbidden(operation, identity, "Access denied.")
