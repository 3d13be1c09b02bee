import logging

import pytest

from hackathon_core import resolve_phase

from factories import make_hackathon


def test_exact_id_wins():
    match = resolve_phase(make_hackathon(), "p2")
    assert match.phase.name == "Prototype"
    assert match.position == 2
    assert match.kind == "exact"
    assert match.key == "p2"


@pytest.mark.parametrize("raw", ["2", "phase2", "Phase-2", "phase_2", "phase 2", " PHASE2 "])
def test_explicit_ordinals_resolve_to_position(raw):
    match = resolve_phase(make_hackathon(), raw)
    assert match.kind == "ordinal"
    assert match.phase.id == "p2"
    # Stored under the canonical id, never the alias.
    assert match.key == "p2"


def test_strict_mode_rejects_unknown_ids(caplog):
    caplog.set_level(logging.INFO, logger="hackathon_core.phases")
    assert resolve_phase(make_hackathon(), "round-2-final") is None
    assert resolve_phase(make_hackathon(), "phase7") is None
    assert resolve_phase(make_hackathon(), "0") is None
    assert resolve_phase(make_hackathon(), None) is None
    assert any(getattr(r, "event", None) == "phase.unresolved" for r in caplog.records)


def test_hackathon_without_phases_resolves_nothing():
    assert resolve_phase(make_hackathon(phases=[]), "p1") is None
    assert resolve_phase(make_hackathon(phases=[]), "x", strict=False) is None


def test_legacy_mode_matches_digits_and_keeps_raw_key():
    match = resolve_phase(make_hackathon(), "round-2-final", strict=False)
    assert match.kind == "legacy_digit"
    assert match.phase.id == "p2"
    assert match.key == "round-2-final"


def test_legacy_mode_defaults_to_first_phase(caplog):
    caplog.set_level(logging.WARNING, logger="hackathon_core.phases")
    match = resolve_phase(make_hackathon(), "kickoff", strict=False)
    assert match.kind == "legacy_default"
    assert match.phase.id == "p1"
    assert match.key == "kickoff"
    assert [getattr(r, "event", None) for r in caplog.records] == ["phase.default_first"]


def test_legacy_mode_still_prefers_exact_and_ordinal():
    assert resolve_phase(make_hackathon(), "p3", strict=False).kind == "exact"
    assert resolve_phase(make_hackathon(), "phase1", strict=False).key == "p1"
