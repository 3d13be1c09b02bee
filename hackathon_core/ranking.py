"""Results engine: total scores, finalize batch and result ordering.

Single source of truth for result ordering across API/UI/export:
- Finalize recomputes total scores and certificate data; it never assigns ranks.
- Final ranks are only set explicitly by industry (see application.assign_rank).
- Result views list ranked applications first (ascending rank), then the rest
  by total score descending.
"""
from __future__ import annotations

import logging
from copy import deepcopy
from dataclasses import dataclass
from typing import Sequence

from .certificates import apply_certificate_urls
from .types import Application, Hackathon
from .validation import CertificateConfig

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ScoreRow:
    application_id: str
    total_score: float
    final_rank: int | None


@dataclass(frozen=True)
class FinalizeResult:
    # Ordered by total score descending (display only; ties keep input order).
    applications: tuple[Application, ...]
    rows: tuple[ScoreRow, ...]


def compute_total_score(application: Application) -> float:
    """Sum of all non-null phase scores."""
    total = 0.0
    for submission in application.phase_submissions.values():
        if submission.score is not None:
            total += float(submission.score)
    return total


def _score_or_zero(application: Application) -> float:
    return float(application.total_score) if application.total_score is not None else 0.0


def apply_certificate_config(application: Application, config: CertificateConfig) -> Application:
    """Copy present config fields onto the application (in place)."""
    template_id = config.certificate_template_id
    if template_id is not None and template_id.strip():
        application.certificate_template_id = template_id
    if config.logo_url is not None:
        application.certificate_logo_url = config.logo_url
    if config.platform_logo_url is not None:
        application.certificate_platform_logo_url = config.platform_logo_url
    if config.custom_message is not None:
        application.certificate_custom_message = config.custom_message
    if config.signature_left_url is not None:
        application.certificate_signature_left_url = config.signature_left_url
    if config.signature_right_url is not None:
        application.certificate_signature_right_url = config.signature_right_url
    return application


def finalize(
    hackathon: Hackathon,
    applications: Sequence[Application],
    config: CertificateConfig | None,
    base_url: str,
) -> FinalizeResult:
    """
    Recompute totals and certificate data for every application of a hackathon.

    Args:
      hackathon: parent hackathon (only used for logging context).
      applications: applications in storage order.
      config: certificate customization; None applies nothing.
      base_url: certificate viewer URL.

    Idempotent: running it again on its own output yields the same state.
    Inputs are not mutated.
    """
    config = config or CertificateConfig()
    updated: list[Application] = []
    for application in applications:
        app = deepcopy(application)
        app.total_score = compute_total_score(app)
        apply_certificate_config(app, config)
        apply_certificate_urls(app, base_url)
        updated.append(app)

    # sorted() is stable, so equal totals keep storage order.
    ordered = sorted(updated, key=lambda app: -_score_or_zero(app))

    logger.info(
        "Finalized %d applications for hackathon %s",
        len(ordered),
        hackathon.id,
        extra={
            "event": "results.finalized",
            "hackathon_id": hackathon.id,
            "count": len(ordered),
            "template_id": config.certificate_template_id,
        },
    )
    return FinalizeResult(
        applications=tuple(ordered),
        rows=tuple(
            ScoreRow(
                application_id=app.id,
                total_score=_score_or_zero(app),
                final_rank=app.final_rank,
            )
            for app in ordered
        ),
    )


def _results_sort_key(application: Application) -> tuple[int, float]:
    if application.final_rank is not None:
        return (0, float(application.final_rank))
    return (1, -_score_or_zero(application))


def sort_for_results(applications: Sequence[Application]) -> list[Application]:
    """Ranked first by ascending rank, then unranked by total score descending."""
    return sorted(applications, key=_results_sort_key)
