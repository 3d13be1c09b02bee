from datetime import datetime, timezone

from hackathon_core import Allow, Application, ApplicationStatus, ApplyRequest, Deny, Phase, can_apply

from factories import make_hackathon

NOW = datetime(2030, 6, 1, tzinfo=timezone.utc)


def _rejected(message=None) -> Application:
    return Application(
        id="a-old",
        hackathon_id="h-1",
        applicant_id="u-alice",
        status=ApplicationStatus.REJECTED,
        rejection_message=message,
    )


def test_individual_application_forces_team_fields():
    decision = can_apply(
        make_hackathon(),
        "u-alice",
        [],
        ApplyRequest(as_team=False, team_name="Ignored", team_size=5),
        NOW,
    )
    assert decision == Allow(as_team=False, team_name=None, team_size=1)


def test_null_as_team_means_individual():
    req = ApplyRequest.model_validate({"asTeam": None, "teamSize": None})
    decision = can_apply(make_hackathon(), "u-alice", [], req, NOW)
    assert isinstance(decision, Allow)
    assert decision.as_team is False
    assert decision.team_size == 1


def test_team_application_keeps_name_size_and_members():
    req = ApplyRequest.model_validate(
        {
            "asTeam": True,
            "teamName": "  Night Owls ",
            "teamSize": 3,
            "teamMembers": [
                {"name": "Ana", "email": "ana@example.com"},
                {"name": "Radu", "email": "radu@example.com", "role": "backend"},
            ],
        }
    )
    decision = can_apply(make_hackathon(), "u-alice", [], req, NOW)
    assert isinstance(decision, Allow)
    assert decision.as_team is True
    assert decision.team_name == "Night Owls"
    assert decision.team_size == 3
    assert [m.email for m in decision.team_members] == ["ana@example.com", "radu@example.com"]
    assert decision.team_members[1].role == "backend"


def test_team_application_requires_name():
    decision = can_apply(
        make_hackathon(), "u-alice", [], ApplyRequest(as_team=True, team_name="  ", team_size=3), NOW
    )
    assert isinstance(decision, Deny)
    assert decision.code == "invalid_team"
    assert decision.reason == "Team name is required for team applications."


def test_team_application_requires_more_than_one_member():
    decision = can_apply(
        make_hackathon(), "u-alice", [], ApplyRequest(as_team=True, team_name="Solo", team_size=1), NOW
    )
    assert isinstance(decision, Deny)
    assert decision.code == "invalid_team"
    assert decision.reason == "Team size must be greater than 1."


def test_published_results_close_applications_before_anything_else():
    hackathon = make_hackathon(
        results_published=True,
        phases=[Phase(id="p1", name="Idea", deadline="2020-01-01T00:00:00")],
        end_date="2020-01-01T00:00:00",
    )
    decision = can_apply(hackathon, "u-alice", [_rejected("Spam")], ApplyRequest(), NOW)
    assert isinstance(decision, Deny)
    assert decision.code == "results_published"
    assert decision.reason == "Applications are closed. Results for this hackathon have been declared."


def test_phase_one_deadline_closes_applications():
    hackathon = make_hackathon(phases=[Phase(id="p1", name="Idea", deadline="2030-05-31 23:00")])
    decision = can_apply(hackathon, "u-alice", [], ApplyRequest(), NOW)
    assert isinstance(decision, Deny)
    assert decision.code == "phase1_deadline_passed"
    assert decision.reason == (
        "Applications are closed. Phase 1 submission deadline (2030-05-31T23:00:00) has passed."
    )


def test_unparseable_deadlines_never_block():
    hackathon = make_hackathon(
        phases=[Phase(id="p1", name="Idea", deadline="whenever")],
        end_date="soon-ish",
    )
    assert isinstance(can_apply(hackathon, "u-alice", [], ApplyRequest(), NOW), Allow)


def test_rejected_applicant_cannot_reapply():
    decision = can_apply(make_hackathon(), "u-alice", [_rejected()], ApplyRequest(), NOW)
    assert isinstance(decision, Deny)
    assert decision.code == "previously_rejected"
    assert decision.reason == (
        "You cannot re-apply to this hackathon. Your previous application was rejected."
    )


def test_rejection_reason_is_appended():
    decision = can_apply(make_hackathon(), "u-alice", [_rejected("Plagiarism")], ApplyRequest(), NOW)
    assert isinstance(decision, Deny)
    assert decision.reason.endswith("\n\nRejection Reason: Plagiarism")


def test_any_rejected_prior_application_counts():
    active = Application(id="a-1", hackathon_id="h-1", applicant_id="u-alice")
    decision = can_apply(make_hackathon(), "u-alice", [active, _rejected()], ApplyRequest(), NOW)
    assert isinstance(decision, Deny)
    assert decision.code == "previously_rejected"


def test_active_prior_application_does_not_block():
    active = Application(id="a-1", hackathon_id="h-1", applicant_id="u-alice")
    assert isinstance(can_apply(make_hackathon(), "u-alice", [active], ApplyRequest(), NOW), Allow)


def test_rejection_checked_before_end_date():
    hackathon = make_hackathon(end_date="2020-01-01")
    decision = can_apply(hackathon, "u-alice", [_rejected()], ApplyRequest(), NOW)
    assert decision.code == "previously_rejected"


def test_end_date_closes_registration():
    decision = can_apply(make_hackathon(end_date="2030-05-01"), "u-alice", [], ApplyRequest(), NOW)
    assert isinstance(decision, Deny)
    assert decision.code == "registration_closed"
    assert decision.reason == "Registration period has ended. Applications are no longer accepted."


def test_hackathon_without_phases_skips_phase_deadline():
    decision = can_apply(make_hackathon(phases=[]), "u-alice", [], ApplyRequest(), NOW)
    assert isinstance(decision, Allow)
