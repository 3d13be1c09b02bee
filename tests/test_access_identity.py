import base64

from hackathon_core import BearerTokenIdentityResolver, Role
from hackathon_core.access import (
    OPERATION_ROLES,
    require_hackathon_owner,
    require_role,
    require_viewer,
)
from hackathon_core.identity import decode_claims
from hackathon_core.memory import InMemoryUserDirectory

from factories import ACME, ALICE, BOB, GLOBEX, make_application, make_hackathon


def _token(payload: str, padded: bool = True) -> str:
    encoded = base64.b64encode(payload.encode("utf-8")).decode("ascii")
    if not padded:
        encoded = encoded.rstrip("=")
    return f"{encoded}.signature"


def _resolver() -> BearerTokenIdentityResolver:
    return BearerTokenIdentityResolver(InMemoryUserDirectory([ALICE, ACME]))


def test_decode_claims_reads_pipe_separated_pairs():
    claims = decode_claims(_token("email:alice@example.com|role:APPLICANT|"))
    assert claims == {"email": "alice@example.com", "role": "APPLICANT"}


def test_decode_claims_tolerates_missing_padding():
    claims = decode_claims(_token("email:hr@acme.io|role:INDUSTRY|", padded=False))
    assert claims["email"] == "hr@acme.io"


def test_decode_claims_rejects_garbage():
    assert decode_claims("no-dots-here") is None
    assert decode_claims(".sig") is None
    assert decode_claims("!!!not base64!!!.sig") is None


def test_resolver_returns_directory_identity():
    identity = _resolver().resolve("Bearer " + _token("email:ALICE@example.com|role:INDUSTRY"))
    # Role comes from the directory, not the token.
    assert identity == ALICE


def test_resolver_returns_none_for_bad_headers():
    resolver = _resolver()
    assert resolver.resolve(None) is None
    assert resolver.resolve("") is None
    assert resolver.resolve("Basic abc") is None
    assert resolver.resolve("Bearer garbage") is None
    assert resolver.resolve("Bearer " + _token("role:APPLICANT")) is None
    assert resolver.resolve("Bearer " + _token("email:nobody@example.com")) is None


def test_missing_identity_is_unauthenticated():
    result = require_role(None, "apply")
    assert result.kind == "unauthenticated"
    assert result.status_code == 401
    assert result.message == "Authentication failed. Please log in again."


def test_wrong_role_is_forbidden():
    result = require_role(ACME, "apply")
    assert result.kind == "forbidden"
    assert result.status_code == 403
    assert result.message == "Only applicants can perform this action. You are: INDUSTRY"

    result = require_role(ALICE, "finalize_results")
    assert result.message == "Only industry users can perform this action. You are: APPLICANT"


def test_role_table_covers_every_guarded_operation():
    assert {op for op, role in OPERATION_ROLES.items() if role == Role.APPLICANT} == {
        "apply",
        "get_my_applications",
        "submit_phase",
    }
    assert require_role(ALICE, "get_results") is None
    assert require_role(ACME, "get_results") is None


def test_hackathon_owner_check():
    hackathon = make_hackathon()
    assert require_hackathon_owner(ACME, hackathon, "review_phase") is None
    assert require_hackathon_owner(GLOBEX, hackathon, "review_phase").kind == "forbidden"
    assert require_hackathon_owner(ACME, None, "review_phase").kind == "forbidden"


def test_viewer_is_owner_applicant_or_owning_industry():
    app = make_application()
    hackathon = make_hackathon()
    assert require_viewer(ALICE, app, hackathon, "get_results") is None
    assert require_viewer(ACME, app, hackathon, "get_results") is None
    assert require_viewer(BOB, app, hackathon, "get_results").kind == "forbidden"
    assert require_viewer(GLOBEX, app, hackathon, "get_results").kind == "forbidden"
