"""Error Hierarchy — codes, categories, severities and the response envelope."""

from skillcheck.core.errors import (
    CalculationInvariantError, ErrorCategory, ErrorContext, ErrorSeverity,
    InvalidRequestError, PortFailureError, SkillCheckError, SkillNotFoundError,
)


def test_all_errors_share_the_base():
    for err in (
        InvalidRequestError("bad", "skill_id"),
        SkillNotFoundError("climb"),
        PortFailureError("down", "skill_lookup"),
        CalculationInvariantError("overflow"),
    ):
        assert isinstance(err, SkillCheckError)


def test_codes_and_categories():
    assert InvalidRequestError("bad", "skill_id").code == "INVALID_REQUEST"
    assert SkillNotFoundError("climb").category == ErrorCategory.RESOURCE_NOT_FOUND
    assert PortFailureError("down", "event_sink").category == ErrorCategory.EXTERNAL_PORT
    assert CalculationInvariantError("x").code == "CALCULATION_INVARIANT_VIOLATION"


def test_request_errors_recoverable_port_errors_not():
    assert InvalidRequestError("bad", "skill_id").recoverable
    assert SkillNotFoundError("climb").recoverable
    assert not PortFailureError("down", "skill_lookup").recoverable
    assert PortFailureError("down", "skill_lookup").severity == ErrorSeverity.CRITICAL
    assert not CalculationInvariantError("x").recoverable


def test_skill_not_found_fills_context_skill_id():
    err = SkillNotFoundError("climb")
    assert err.skill_id == "climb"
    assert err.context.skill_id == "climb"
    assert "climb" in err.message


def test_port_failure_names_the_port():
    err = PortFailureError("connection refused", "skill_lookup")
    assert err.port == "skill_lookup"
    assert err.message == "Port 'skill_lookup' failed: connection refused"


def test_to_response_envelope():
    ctx = ErrorContext(invocation_id="inv-1", character_id="char-1", stage="initialized")
    body = SkillNotFoundError("climb", ctx).to_response()["error"]
    assert body["code"] == "SKILL_NOT_FOUND"
    assert body["category"] == "resource_not_found"
    assert body["severity"] == "error"
    assert body["context"] == {
        "invocation_id": "inv-1",
        "character_id": "char-1",
        "skill_id": "climb",
        "stage": "initialized",
    }
