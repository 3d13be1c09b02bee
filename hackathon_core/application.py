"""Application lifecycle transitions (pure, no persistence/notification).

Every transition takes the current Application (plus the parent Hackathon where
phase data is needed), works on a deepcopy and returns either a
TransitionOutcome with the updated copy or a Failure. Inputs are never mutated,
so a rejected transition leaves the caller's state exactly as it was.

Application states:
- ACTIVE → REJECTED (one-way, industry-triggered, optional message)

Phase submission states:
- (none) → PENDING on submit
- PENDING → ACCEPTED | REJECTED | REUPLOAD_REQUESTED on review / re-upload request
- any resubmission → PENDING, reupload_count carried forward
- REUPLOAD_REQUESTED → PENDING sets is_reuploaded=True
- REUPLOAD_REQUESTED → ACCEPTED is refused until the applicant resubmits
- reupload_count is capped at ReviewLimits.MAX_REUPLOADS (2)

Cascades:
- a phase submission reviewed as REJECTED rejects the whole application
- the first explicit rank in a hackathon sets results_published permanently
"""
from __future__ import annotations

import logging
from copy import deepcopy
from dataclasses import dataclass
from datetime import datetime

from .config import ReviewLimits
from .deadlines import deadline_passed, format_deadline
from .eligibility import Allow
from .phases import resolve_phase
from .types import (
    Application,
    ApplicationStatus,
    Failure,
    Hackathon,
    PhaseSubmission,
    ShowcaseContent,
    SubmissionStatus,
    failure,
)
from .validation import (
    ApplyRequest,
    InputSanitizer,
    ReviewRequest,
    ShowcaseRequest,
    SubmissionRequest,
)

logger = logging.getLogger(__name__)


@dataclass
class TransitionOutcome:
    """Result of applying a transition."""

    application: Application
    event: str
    # Set only when the transition also changed the parent hackathon.
    hackathon: Hackathon | None = None


def _log_transition(app: Application, event: str, **fields) -> None:
    logger.info(
        "Application %s: %s",
        app.id,
        event,
        extra={
            "event": event,
            "application_id": app.id,
            "hackathon_id": app.hackathon_id,
            **fields,
        },
    )


def create_application(
    application_id: str,
    hackathon: Hackathon,
    applicant_id: str,
    request: ApplyRequest,
    decision: Allow,
    now: datetime,
) -> TransitionOutcome:
    """Build a new ACTIVE application from an allowed apply request.

    Team fields come from the eligibility decision (already normalized), the
    individual contact fields from the request.
    """
    app = Application(
        id=application_id,
        hackathon_id=hackathon.id,
        applicant_id=applicant_id,
        as_team=decision.as_team,
        team_name=decision.team_name,
        team_size=decision.team_size,
        team_members=[deepcopy(m) for m in decision.team_members],
        individual_name=(
            InputSanitizer.sanitize_display_name(request.individual_name)
            if request.individual_name
            else None
        ),
        individual_email=InputSanitizer.sanitize_optional(request.individual_email, 320),
        individual_phone=InputSanitizer.sanitize_optional(request.individual_phone, 32),
        individual_qualifications=InputSanitizer.sanitize_optional(
            request.individual_qualifications, 2000
        ),
        status=ApplicationStatus.ACTIVE,
        applied_at=now,
    )
    _log_transition(app, "application.created", applicant_id=applicant_id)
    return TransitionOutcome(application=app, event="application.created")


def _find_submission(
    app: Application, hackathon: Hackathon, phase_id: str, *, strict: bool
) -> tuple[str, PhaseSubmission] | None:
    # Raw key first (covers submissions stored before ids were canonical).
    if phase_id in app.phase_submissions:
        return phase_id, app.phase_submissions[phase_id]
    match = resolve_phase(hackathon, phase_id, strict=strict)
    if match is None:
        return None
    submission = app.phase_submissions.get(match.key)
    if submission is None:
        return None
    return match.key, submission


def submit_phase(
    application: Application,
    hackathon: Hackathon,
    phase_id: str,
    submission: SubmissionRequest,
    now: datetime,
    *,
    strict: bool = True,
) -> TransitionOutcome | Failure:
    """Store (or overwrite) the applicant's submission for a phase.

    Returns:
        TransitionOutcome with the submission reset to PENDING, or a Failure:
        - conflict: application rejected, or the phase deadline has passed
        - not_found: the phase cannot be resolved (strict mode)

    Any resubmission keeps the phase's re-upload counter. Only a resubmission
    answering REUPLOAD_REQUESTED is marked as re-uploaded.
    """
    if application.status == ApplicationStatus.REJECTED:
        return failure("conflict", "Application is rejected.")

    match = resolve_phase(hackathon, phase_id, strict=strict)
    if match is None:
        return failure("not_found", f"Phase '{phase_id}' not found in this hackathon.")

    passed, deadline = deadline_passed(match.phase.deadline, now)
    if passed and deadline is not None:
        logger.info(
            "Submission for %s refused: deadline %s passed",
            match.phase.name,
            deadline,
            extra={
                "event": "submission.deadline_exceeded",
                "application_id": application.id,
                "phase_id": match.phase.id,
            },
        )
        return failure(
            "conflict",
            f"Submission deadline has passed. The deadline for {match.phase.name} "
            f"was {format_deadline(deadline)}.",
        )

    app = deepcopy(application)
    key = match.key
    existing = app.phase_submissions.get(key)
    # Counter is per phase, not per submission.
    reupload_count = (existing.reupload_count or 0) if existing is not None else 0
    is_reuploaded = (
        existing is not None and existing.status == SubmissionStatus.REUPLOAD_REQUESTED
    )

    app.phase_submissions[key] = PhaseSubmission(
        content=submission.content,
        description=submission.description,
        status=SubmissionStatus.PENDING,
        reupload_count=reupload_count,
        is_reuploaded=is_reuploaded,
        submitted_at=now,
    )
    app.current_phase_id = key
    _log_transition(
        app,
        "submission.received",
        phase_id=key,
        reupload_count=reupload_count,
        is_reuploaded=is_reuploaded,
    )
    return TransitionOutcome(application=app, event="submission.received")


def review_phase(
    application: Application,
    hackathon: Hackathon,
    phase_id: str,
    review: ReviewRequest,
    *,
    strict: bool = True,
) -> TransitionOutcome | Failure:
    """Record an industry review for a phase submission.

    Caller ownership of the hackathon is checked by the access layer before
    this is reached.
    """
    found = _find_submission(application, hackathon, phase_id, strict=strict)
    if found is None:
        return failure("not_found", "No submission found for this phase.")
    key, existing = found

    if (
        existing.status == SubmissionStatus.REUPLOAD_REQUESTED
        and review.status == SubmissionStatus.ACCEPTED
    ):
        return failure(
            "conflict",
            "Cannot accept a submission that has been requested for re-upload. "
            "Please wait for the applicant to submit a new solution.",
        )

    app = deepcopy(application)
    target = app.phase_submissions[key]
    target.status = review.status
    target.score = review.score
    target.remarks = review.remarks

    # Submission-level rejection cascades to the whole application.
    if review.status == SubmissionStatus.REJECTED:
        app.status = ApplicationStatus.REJECTED

    _log_transition(
        app,
        "submission.reviewed",
        phase_id=key,
        status=review.status.value,
        score=review.score,
    )
    return TransitionOutcome(application=app, event="submission.reviewed")


def request_reupload(
    application: Application,
    hackathon: Hackathon,
    phase_id: str,
    message: str | None,
    *,
    strict: bool = True,
) -> TransitionOutcome | Failure:
    found = _find_submission(application, hackathon, phase_id, strict=strict)
    if found is None:
        return failure("not_found", "No submission found for this phase.")
    key, existing = found

    current = existing.reupload_count or 0
    if current >= ReviewLimits.MAX_REUPLOADS:
        return failure(
            "conflict",
            f"Maximum re-upload limit reached ({ReviewLimits.MAX_REUPLOADS} times). "
            "You cannot request another re-upload for this submission.",
        )

    app = deepcopy(application)
    target = app.phase_submissions[key]
    target.reupload_count = current + 1
    target.status = SubmissionStatus.REUPLOAD_REQUESTED
    if message and message.strip():
        target.remarks = message

    _log_transition(
        app,
        "submission.reupload_requested",
        phase_id=key,
        reupload_count=target.reupload_count,
    )
    return TransitionOutcome(application=app, event="submission.reupload_requested")


def reject(application: Application, message: str | None) -> TransitionOutcome:
    """Reject the application. Re-rejecting is allowed and overwrites the message."""
    app = deepcopy(application)
    app.status = ApplicationStatus.REJECTED
    if message and message.strip():
        app.rejection_message = message
    _log_transition(app, "application.rejected")
    return TransitionOutcome(application=app, event="application.rejected")


def assign_rank(
    application: Application, hackathon: Hackathon, rank: int | None
) -> TransitionOutcome | Failure:
    """Set an explicit final rank; a non-null rank publishes the hackathon's results.

    rank=None clears the rank and leaves results_published as it is.
    """
    if rank is not None and (isinstance(rank, bool) or not isinstance(rank, int) or rank < 1):
        return failure("validation", "finalRank must be a positive integer.")

    app = deepcopy(application)
    app.final_rank = rank
    updated_hackathon = None
    if rank is not None and not hackathon.results_published:
        updated_hackathon = deepcopy(hackathon)
        updated_hackathon.results_published = True
        logger.info(
            "Hackathon %s results published by first rank assignment",
            hackathon.id,
            extra={"event": "hackathon.results_published", "hackathon_id": hackathon.id},
        )
    _log_transition(app, "rank.assigned", final_rank=rank)
    return TransitionOutcome(
        application=app, event="rank.assigned", hackathon=updated_hackathon
    )


def set_total_score(application: Application, score: float) -> TransitionOutcome:
    """Manual override of total_score, independent of phase scores."""
    app = deepcopy(application)
    app.total_score = float(score)
    _log_transition(app, "score.overridden", total_score=app.total_score)
    return TransitionOutcome(application=app, event="score.overridden")


def publish_showcase(
    application: Application, showcase: ShowcaseRequest, now: datetime
) -> TransitionOutcome | Failure:
    rank = application.final_rank
    if rank is None or not 1 <= rank <= ReviewLimits.SHOWCASE_MAX_RANK:
        return failure(
            "conflict",
            f"Showcase only available for top {ReviewLimits.SHOWCASE_MAX_RANK} winners.",
        )
    app = deepcopy(application)
    app.showcase_content = ShowcaseContent(
        title=showcase.title,
        description=showcase.description,
        project_url=showcase.project_url,
        media_urls=list(showcase.media_urls),
        published_at=now,
    )
    _log_transition(app, "showcase.published", final_rank=rank)
    return TransitionOutcome(application=app, event="showcase.published")


__all__ = [
    "TransitionOutcome",
    "assign_rank",
    "create_application",
    "publish_showcase",
    "reject",
    "request_reupload",
    "review_phase",
    "set_total_score",
    "submit_phase",
]
