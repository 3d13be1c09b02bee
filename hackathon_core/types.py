"""Domain types for hackathons, applications and phase submissions."""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Dict, List, Optional


class Role(str, Enum):
    APPLICANT = "APPLICANT"
    INDUSTRY = "INDUSTRY"


class ApplicationStatus(str, Enum):
    ACTIVE = "ACTIVE"
    REJECTED = "REJECTED"


class SubmissionStatus(str, Enum):
    PENDING = "PENDING"
    ACCEPTED = "ACCEPTED"
    REJECTED = "REJECTED"
    REUPLOAD_REQUESTED = "REUPLOAD_REQUESTED"


@dataclass(frozen=True)
class Identity:
    id: str
    email: str
    role: Role
    name: str | None = None


@dataclass
class Phase:
    id: str
    name: str
    deadline: Optional[str] = None  # raw string, parsed by deadlines.parse_deadline
    description: Optional[str] = None


@dataclass
class Hackathon:
    id: str
    created_by_industry_id: str
    title: str = ""
    phases: List[Phase] = field(default_factory=list)
    end_date: Optional[str] = None
    # Monotonic: once True it is never reset.
    results_published: bool = False


@dataclass
class TeamMember:
    name: str
    email: str
    phone: Optional[str] = None
    role: Optional[str] = None
    certificate_url: Optional[str] = None


@dataclass
class PhaseSubmission:
    content: str
    description: Optional[str] = None
    status: SubmissionStatus = SubmissionStatus.PENDING
    score: Optional[float] = None
    remarks: Optional[str] = None
    reupload_count: int = 0
    is_reuploaded: bool = False
    submitted_at: Optional[datetime] = None


@dataclass
class ShowcaseContent:
    title: str
    description: Optional[str] = None
    project_url: Optional[str] = None
    media_urls: List[str] = field(default_factory=list)
    published_at: Optional[datetime] = None


@dataclass
class Application:
    """A single applicant's (or team's) entry in a hackathon."""

    id: str
    hackathon_id: str
    applicant_id: str

    # Team / individual mode
    as_team: bool = False
    team_name: Optional[str] = None
    team_size: int = 1
    team_members: List[TeamMember] = field(default_factory=list)
    individual_name: Optional[str] = None
    individual_email: Optional[str] = None
    individual_phone: Optional[str] = None
    individual_qualifications: Optional[str] = None

    # Review state
    status: ApplicationStatus = ApplicationStatus.ACTIVE
    rejection_message: Optional[str] = None
    phase_submissions: Dict[str, PhaseSubmission] = field(default_factory=dict)
    current_phase_id: Optional[str] = None

    # Results
    total_score: Optional[float] = None
    final_rank: Optional[int] = None  # only ever set explicitly by industry
    certificate_url: Optional[str] = None
    certificate_template_id: Optional[str] = None
    certificate_logo_url: Optional[str] = None
    certificate_platform_logo_url: Optional[str] = None
    certificate_custom_message: Optional[str] = None
    certificate_signature_left_url: Optional[str] = None
    certificate_signature_right_url: Optional[str] = None
    showcase_content: Optional[ShowcaseContent] = None

    applied_at: Optional[datetime] = None


@dataclass
class Failure:
    """Typed, user-renderable failure returned by the core (never raised)."""

    kind: str
    message: str | None = None
    status_code: int | None = None


FAILURE_STATUS_CODES = {
    "unauthenticated": 401,
    "forbidden": 403,
    "not_found": 404,
    "conflict": 409,
    "validation": 400,
    "internal": 500,
}


def failure(kind: str, message: str | None = None) -> Failure:
    return Failure(kind=kind, message=message, status_code=FAILURE_STATUS_CODES.get(kind))
