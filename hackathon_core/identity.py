"""Default identity resolver for the platform's bearer tokens.

Token layout: ``<payload>.<part>[.<part>]`` where ``payload`` is base64 of
``key:value|key:value|...``. Only the ``email`` claim is used; it is looked up
in the user directory to build the full Identity. Signature checking belongs
to the auth service that issues the token.
"""
from __future__ import annotations

import base64
import binascii
import logging

from .ports import UserDirectory
from .types import Identity

logger = logging.getLogger(__name__)

BEARER_PREFIX = "Bearer "


def decode_claims(token: str) -> dict[str, str] | None:
    """Decode the claim map from a token, or None if it is malformed.

    Examples:
        - base64("email:a@b.c|role:APPLICANT|") + ".sig" → {"email": "a@b.c", "role": "APPLICANT"}
        - "not-a-token" → None
    """
    parts = token.split(".")
    if len(parts) < 2 or not parts[0]:
        return None
    raw = parts[0]
    # Tolerate stripped padding.
    raw += "=" * (-len(raw) % 4)
    try:
        payload = base64.b64decode(raw, validate=True).decode("utf-8")
    except (binascii.Error, ValueError):
        return None

    claims: dict[str, str] = {}
    for pair in payload.split("|"):
        if ":" not in pair:
            continue
        key, value = pair.split(":", 1)
        claims[key] = value
    return claims


class BearerTokenIdentityResolver:
    def __init__(self, users: UserDirectory):
        self.users = users

    def resolve(self, authorization: str | None) -> Identity | None:
        if not authorization or not authorization.startswith(BEARER_PREFIX):
            logger.debug(
                "No bearer token in Authorization header",
                extra={"event": "identity.missing_bearer"},
            )
            return None
        claims = decode_claims(authorization[len(BEARER_PREFIX):].strip())
        if claims is None:
            logger.info("Malformed bearer token", extra={"event": "identity.malformed_token"})
            return None
        email = claims.get("email")
        if not email:
            logger.info(
                "Bearer token carries no email claim",
                extra={"event": "identity.missing_email"},
            )
            return None
        identity = self.users.get_by_email(email)
        if identity is None:
            logger.info(
                "No user found for token email",
                extra={"event": "identity.unknown_user"},
            )
        return identity
