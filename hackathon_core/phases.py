"""Resolve a caller-supplied phase identifier against a hackathon's phase list."""
from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Literal

from .types import Hackathon, Phase

logger = logging.getLogger(__name__)

MatchKind = Literal["exact", "ordinal", "legacy_digit", "legacy_default"]

# "1", "phase1", "Phase-2", "phase_3", "phase 1"
_ORDINAL = re.compile(r"^(?:phase[\s_-]?)?(\d+)$", re.IGNORECASE)


@dataclass(frozen=True)
class PhaseMatch:
    phase: Phase
    position: int  # 1-based
    kind: MatchKind
    requested: str = ""

    @property
    def key(self) -> str:
        """Key under which the submission for this phase is stored."""
        if self.kind.startswith("legacy") and self.requested:
            return self.requested
        return self.phase.id


def _legacy_digit_position(phase_id: str) -> int | None:
    lowered = phase_id.lower()
    for digit in ("1", "2", "3"):
        if digit in lowered:
            return int(digit)
    return None


def resolve_phase(
    hackathon: Hackathon, phase_id: str | None, *, strict: bool = True
) -> PhaseMatch | None:
    """Find the phase a request refers to.

    Strict mode accepts an exact id or an explicit ordinal ("phase2", "2") and
    returns None for anything else. Non-strict mode keeps the old behaviour of
    matching any id containing 1/2/3 and falling back to the first phase.
    """
    phases = hackathon.phases or []
    if not phases:
        return None
    raw = (phase_id or "").strip()

    for idx, phase in enumerate(phases):
        if phase.id is not None and phase.id == raw:
            return PhaseMatch(phase=phase, position=idx + 1, kind="exact")

    ordinal = _ORDINAL.match(raw)
    if ordinal:
        position = int(ordinal.group(1))
        if 1 <= position <= len(phases):
            return PhaseMatch(phase=phases[position - 1], position=position, kind="ordinal")

    if strict:
        logger.info(
            "Phase %r not found in hackathon %s",
            raw,
            hackathon.id,
            extra={"event": "phase.unresolved", "hackathon_id": hackathon.id, "phase_id": raw},
        )
        return None

    position = _legacy_digit_position(raw)
    if position is not None and position <= len(phases):
        return PhaseMatch(
            phase=phases[position - 1], position=position, kind="legacy_digit", requested=raw
        )

    logger.warning(
        "Phase %r not resolvable in hackathon %s; defaulting to first phase",
        raw,
        hackathon.id,
        extra={"event": "phase.default_first", "hackathon_id": hackathon.id, "phase_id": raw},
    )
    return PhaseMatch(
        phase=phases[0], position=1, kind="legacy_default", requested=raw
    )
