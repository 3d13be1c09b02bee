"""
Request validation schemas using Pydantic v2
Validates every payload accepted by the application service
"""

import logging
import re
from typing import Any, List, Optional, Self

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
    field_validator,
    model_validator,
)
from pydantic.alias_generators import to_camel

from .types import SubmissionStatus

logger = logging.getLogger(__name__)

# Clients send camelCase JSON (teamName, finalRank); Python callers may use snake_case.
_REQUEST_CONFIG = ConfigDict(
    alias_generator=to_camel, populate_by_name=True, extra="ignore"
)

_DANGEROUS_PATTERNS = [
    "--",
    "/*",
    "*/",
    "<script",
    "</script",
    "javascript:",
    "onerror=",
    "onclick=",
    "onload=",
    "<iframe",
    "<object",
    "<embed",
    "eval(",
    "alert(",
]

_SQL_KEYWORDS = ("DROP ", "DELETE ", "INSERT ", "UPDATE ", "SELECT ")


def _check_display_name(v: str, field_name: str) -> str:
    """Reject names carrying XSS or SQL injection patterns"""
    v = v.strip()
    v_upper = v.upper()
    for pattern in _DANGEROUS_PATTERNS:
        if pattern.upper() in v_upper:
            raise ValueError(f"{field_name} contains potentially dangerous pattern: {pattern}")
    if ";" in v and any(keyword in v_upper + " " for keyword in _SQL_KEYWORDS):
        raise ValueError(f"{field_name} contains potential SQL injection pattern")
    # Allow apostrophes in names like O'Connor, but not quote-based boolean tricks
    if "'" in v and ("OR" in v_upper or "AND" in v_upper) and "=" in v:
        raise ValueError(f"{field_name} contains potential SQL injection pattern")
    if "<" in v and ">" in v:
        raise ValueError(f"{field_name} contains HTML tags")
    return v


# ==================== REQUEST MODELS ====================


class TeamMemberIn(BaseModel):
    model_config = _REQUEST_CONFIG

    name: str = Field(..., min_length=1, max_length=255)
    email: str = Field(..., min_length=3, max_length=320)
    phone: Optional[str] = Field(None, max_length=32)
    role: Optional[str] = Field(None, max_length=100)

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        v = _check_display_name(v, "team member name")
        if not v:
            raise ValueError("team member name cannot be empty")
        return v

    @field_validator("email")
    @classmethod
    def validate_email(cls, v: str) -> str:
        v = v.strip()
        if "@" not in v or v.startswith("@") or v.endswith("@"):
            raise ValueError("team member email must be an e-mail address")
        return v


class ApplyRequest(BaseModel):
    """Body of an apply call (individual or team)"""

    model_config = _REQUEST_CONFIG

    as_team: bool = False
    team_name: Optional[str] = Field(None, max_length=255)
    team_size: int = Field(1, ge=0, le=100)
    team_members: List[TeamMemberIn] = Field(default_factory=list, max_length=100)

    individual_name: Optional[str] = Field(None, max_length=255)
    individual_email: Optional[str] = Field(None, max_length=320)
    individual_phone: Optional[str] = Field(None, max_length=32)
    individual_qualifications: Optional[str] = Field(None, max_length=2000)

    @field_validator("as_team", mode="before")
    @classmethod
    def default_as_team(cls, v: Any) -> Any:
        # A null asTeam means an individual application.
        return False if v is None else v

    @field_validator("team_size", mode="before")
    @classmethod
    def default_team_size(cls, v: Any) -> Any:
        return 1 if v is None else v

    @field_validator("team_name", "individual_name")
    @classmethod
    def validate_names(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return v
        return _check_display_name(v, "name")


class SubmissionRequest(BaseModel):
    model_config = _REQUEST_CONFIG

    content: str = Field(..., min_length=1, max_length=4096, description="Solution reference (URL or file key)")
    description: Optional[str] = Field(None, max_length=5000)

    @field_validator("content")
    @classmethod
    def validate_content(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("content cannot be empty")
        return v


class ReviewRequest(BaseModel):
    model_config = _REQUEST_CONFIG

    status: SubmissionStatus
    score: Optional[float] = Field(None, ge=0.0, le=10000.0)
    remarks: Optional[str] = Field(None, max_length=5000)

    @field_validator("status", mode="before")
    @classmethod
    def normalize_status(cls, v: Any) -> Any:
        if isinstance(v, str):
            return v.strip().upper()
        return v

    @model_validator(mode="after")
    def validate_review_status(self) -> Self:
        # Re-upload requests go through request_reupload so the counter is kept.
        if self.status == SubmissionStatus.REUPLOAD_REQUESTED:
            raise ValueError("use request_reupload to ask for a new submission")
        return self


class ReuploadRequest(BaseModel):
    model_config = _REQUEST_CONFIG

    message: Optional[str] = Field(None, max_length=5000)


class RejectRequest(BaseModel):
    model_config = _REQUEST_CONFIG

    rejection_message: Optional[str] = Field(None, max_length=5000)


class CertificateConfig(BaseModel):
    """Certificate customization applied at finalize time.

    Each field is independently optional: an absent (None) field leaves the
    stored value untouched. An empty string is applied as-is, except for
    ``certificate_template_id`` which must be non-blank to take effect.
    """

    model_config = _REQUEST_CONFIG

    certificate_template_id: Optional[str] = Field(None, max_length=100)
    logo_url: Optional[str] = Field(None, max_length=2048)
    platform_logo_url: Optional[str] = Field(None, max_length=2048)
    custom_message: Optional[str] = Field(None, max_length=2000)
    signature_left_url: Optional[str] = Field(None, max_length=2048)
    signature_right_url: Optional[str] = Field(None, max_length=2048)

    @field_validator(
        "certificate_template_id",
        "logo_url",
        "platform_logo_url",
        "custom_message",
        "signature_left_url",
        "signature_right_url",
        mode="before",
    )
    @classmethod
    def stringify(cls, v: Any) -> Any:
        # Older clients send numeric template ids.
        if v is None or isinstance(v, str):
            return v
        if isinstance(v, (int, float)) and not isinstance(v, bool):
            return str(v)
        return v


class RankUpdate(BaseModel):
    """Manual rank / score correction. Only fields present in the body are applied."""

    model_config = _REQUEST_CONFIG

    final_rank: Optional[int] = Field(None, ge=1, le=100000)
    total_score: Optional[float] = Field(None, ge=0.0)

    @property
    def has_rank(self) -> bool:
        return "final_rank" in self.model_fields_set

    @property
    def has_total_score(self) -> bool:
        return "total_score" in self.model_fields_set and self.total_score is not None

    @model_validator(mode="after")
    def validate_not_empty(self) -> Self:
        if not (self.has_rank or self.has_total_score):
            raise ValueError("rank update requires finalRank or totalScore")
        return self


class ShowcaseRequest(BaseModel):
    model_config = _REQUEST_CONFIG

    title: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = Field(None, max_length=10000)
    project_url: Optional[str] = Field(None, max_length=2048)
    media_urls: List[str] = Field(default_factory=list, max_length=20)

    @field_validator("title")
    @classmethod
    def validate_title(cls, v: str) -> str:
        v = _check_display_name(v, "title")
        if not v:
            raise ValueError("title cannot be empty")
        return v


class InputSanitizer:
    """Utility class for input sanitization"""

    @staticmethod
    def sanitize_string(value: str, max_length: int = 255) -> str:
        """Sanitize string input"""
        if not isinstance(value, str):
            return str(value)[:max_length]

        # Strip whitespace
        value = value.strip()

        # Limit length
        value = value[:max_length]

        # Remove null bytes
        value = value.replace("\0", "")

        return value

    @staticmethod
    def sanitize_display_name(name: str) -> str:
        """Sanitize participant or team name for display - preserve diacritics"""
        name = InputSanitizer.sanitize_string(name, 255)

        # Keep Unicode letters, digits, spaces, dashes, apostrophes; drop markup and control chars
        dangerous_chars = r'[<>{}[\]\\|;()&$`"\*\x00-\x1f\x7f]'
        name = re.sub(dangerous_chars, "", name)

        return name.strip()

    @staticmethod
    def sanitize_optional(value: Optional[str], max_length: int = 255) -> Optional[str]:
        if value is None:
            return None
        cleaned = InputSanitizer.sanitize_string(value, max_length)
        return cleaned or None


def parse_request(model: type[BaseModel], payload: Any) -> BaseModel:
    """
    Validate a request payload into ``model``.

    Accepts an already-built model instance, a dict, or None (treated as {}).

    Raises:
        pydantic.ValidationError: If validation fails
    """
    if isinstance(payload, model):
        return payload
    try:
        return model.model_validate(payload or {})
    except ValidationError as e:
        logger.warning(
            "%s validation failed: %s",
            model.__name__,
            e.errors(include_url=False),
            extra={"event": "request.invalid", "model": model.__name__},
        )
        raise


def describe_validation_error(error: ValidationError) -> str:
    """Flatten pydantic errors into one human-readable line"""
    parts = []
    for err in error.errors(include_url=False):
        loc = ".".join(str(p) for p in err.get("loc", ()) if p != "__root__")
        msg = err.get("msg", "invalid value")
        parts.append(f"{loc}: {msg}" if loc else msg)
    return "; ".join(parts) or "invalid request"


# ==================== EXPORT ====================

__all__ = [
    "ApplyRequest",
    "CertificateConfig",
    "InputSanitizer",
    "RankUpdate",
    "RejectRequest",
    "ReuploadRequest",
    "ReviewRequest",
    "ShowcaseRequest",
    "SubmissionRequest",
    "TeamMemberIn",
    "describe_validation_error",
    "parse_request",
]
