"""Shared builders for hackathon core tests."""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone

from hackathon_core import Application, Hackathon, Identity, Phase, PhaseSubmission, Role

NOW = datetime(2030, 6, 1, 12, 0, 0, tzinfo=timezone.utc)

CERT_BASE = "https://results.example.com/cert"

ALICE = Identity(id="u-alice", email="alice@example.com", role=Role.APPLICANT, name="Alice")
BOB = Identity(id="u-bob", email="bob@example.com", role=Role.APPLICANT, name="Bob")
ACME = Identity(id="u-acme", email="hr@acme.io", role=Role.INDUSTRY, name="Acme")
GLOBEX = Identity(id="u-globex", email="hr@globex.io", role=Role.INDUSTRY, name="Globex")


def make_hackathon(**overrides) -> Hackathon:
    data = dict(
        id="h-1",
        created_by_industry_id=ACME.id,
        title="Spring Hack",
        phases=[
            Phase(id="p1", name="Idea Submission", deadline="2099-01-01T00:00:00"),
            Phase(id="p2", name="Prototype", deadline="2099-02-01 18:00"),
            Phase(id="p3", name="Final Pitch", deadline=None),
        ],
        end_date="2099-03-01T00:00:00",
    )
    data.update(overrides)
    return Hackathon(**data)


def make_application(app_id: str = "a-1", **overrides) -> Application:
    data = dict(id=app_id, hackathon_id="h-1", applicant_id=ALICE.id)
    data.update(overrides)
    return Application(**data)


def scored(score: float | None, **overrides) -> PhaseSubmission:
    return PhaseSubmission(content="https://git.example.com/x", score=score, **overrides)


@dataclass
class RecordingSink:
    events: list = field(default_factory=list)

    def emit(self, event) -> None:
        self.events.append(event)

    @property
    def names(self) -> list[str]:
        return [e.name for e in self.events]
