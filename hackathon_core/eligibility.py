"""Decide whether an applicant may open a new application for a hackathon.

Checks run in a fixed order and the first failing one wins:

1. results already published
2. phase 1 deadline passed (unparseable deadline never blocks)
3. a previous application by the same applicant was rejected (permanent)
4. hackathon end date passed (unparseable end date never blocks)
5. team mode with a blank team name or a team size <= 1
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Iterable, Literal

from .deadlines import deadline_passed, format_deadline
from .types import Application, ApplicationStatus, Hackathon, TeamMember
from .validation import ApplyRequest, InputSanitizer

logger = logging.getLogger(__name__)

DenyCode = Literal[
    "results_published",
    "phase1_deadline_passed",
    "previously_rejected",
    "registration_closed",
    "invalid_team",
]


@dataclass(frozen=True)
class Allow:
    """Normalized team fields to hand to the state machine."""

    as_team: bool
    team_name: str | None
    team_size: int
    team_members: tuple[TeamMember, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class Deny:
    code: DenyCode
    reason: str


def _deny(hackathon: Hackathon, applicant_id: str, code: DenyCode, reason: str) -> Deny:
    logger.info(
        "Application denied for applicant %s on hackathon %s: %s",
        applicant_id,
        hackathon.id,
        code,
        extra={
            "event": "eligibility.deny",
            "hackathon_id": hackathon.id,
            "applicant_id": applicant_id,
            "code": code,
        },
    )
    return Deny(code=code, reason=reason)


def _rejected_application(
    prior_applications: Iterable[Application], hackathon_id: str, applicant_id: str
) -> Application | None:
    for app in prior_applications:
        if app.hackathon_id != hackathon_id or app.applicant_id != applicant_id:
            continue
        if app.status == ApplicationStatus.REJECTED:
            return app
    return None


def can_apply(
    hackathon: Hackathon,
    applicant_id: str,
    prior_applications: Iterable[Application],
    request: ApplyRequest,
    now: datetime,
) -> Allow | Deny:
    if hackathon.results_published:
        return _deny(
            hackathon,
            applicant_id,
            "results_published",
            "Applications are closed. Results for this hackathon have been declared.",
        )

    if hackathon.phases:
        passed, deadline = deadline_passed(hackathon.phases[0].deadline, now)
        if passed and deadline is not None:
            return _deny(
                hackathon,
                applicant_id,
                "phase1_deadline_passed",
                "Applications are closed. Phase 1 submission deadline "
                f"({format_deadline(deadline)}) has passed.",
            )

    rejected = _rejected_application(prior_applications, hackathon.id, applicant_id)
    if rejected is not None:
        reason = (
            "You cannot re-apply to this hackathon. "
            "Your previous application was rejected."
        )
        if rejected.rejection_message and rejected.rejection_message.strip():
            reason += f"\n\nRejection Reason: {rejected.rejection_message}"
        return _deny(hackathon, applicant_id, "previously_rejected", reason)

    passed, _ = deadline_passed(hackathon.end_date, now)
    if passed:
        return _deny(
            hackathon,
            applicant_id,
            "registration_closed",
            "Registration period has ended. Applications are no longer accepted.",
        )

    if request.as_team:
        team_name = InputSanitizer.sanitize_optional(request.team_name)
        if not team_name:
            return _deny(
                hackathon,
                applicant_id,
                "invalid_team",
                "Team name is required for team applications.",
            )
        if request.team_size <= 1:
            return _deny(
                hackathon,
                applicant_id,
                "invalid_team",
                "Team size must be greater than 1.",
            )
        members = tuple(
            TeamMember(
                name=InputSanitizer.sanitize_display_name(m.name),
                email=m.email,
                phone=m.phone,
                role=m.role,
            )
            for m in request.team_members
        )
        decision = Allow(
            as_team=True,
            team_name=InputSanitizer.sanitize_display_name(team_name),
            team_size=request.team_size,
            team_members=members,
        )
    else:
        # Individual mode: team fields are forced regardless of what was sent.
        decision = Allow(as_team=False, team_name=None, team_size=1)

    logger.info(
        "Application allowed for applicant %s on hackathon %s",
        applicant_id,
        hackathon.id,
        extra={
            "event": "eligibility.allow",
            "hackathon_id": hackathon.id,
            "applicant_id": applicant_id,
            "as_team": decision.as_team,
        },
    )
    return decision
