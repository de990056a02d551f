import json

import pytest

from dao_governance.domain.proposal import ProposalType, VoteDirection
from dao_governance.governance.engine import GovernanceEngine
from dao_governance.observability.logging import configure_logging, get_logger


def _log_lines(captured: str) -> list[dict[str, object]]:
    return [json.loads(line) for line in captured.splitlines() if line.strip()]


def test_logs_are_json_on_stderr(capsys: pytest.CaptureFixture[str]) -> None:
    configure_logging("DEBUG")

    get_logger("test").info("test_event", key="value")

    captured = capsys.readouterr()
    assert captured.out == ""
    [entry] = _log_lines(captured.err)
    assert entry["event"] == "test_event"
    assert entry["key"] == "value"
    assert entry["level"] == "info"
    assert "timestamp" in entry


def test_level_filter_drops_debug(capsys: pytest.CaptureFixture[str]) -> None:
    configure_logging("WARNING")

    get_logger("test").info("quiet_event")
    get_logger("test").warning("loud_event")

    events = [entry["event"] for entry in _log_lines(capsys.readouterr().err)]
    assert events == ["loud_event"]


def test_signatures_never_reach_logs(capsys: pytest.CaptureFixture[str]) -> None:
    configure_logging("INFO")

    get_logger("test").info("request_received", signature="5Kd3NBUAdUnhyzenEwVLy9pBKxSwXvE9FMPyR4UKZvpe")

    [entry] = _log_lines(capsys.readouterr().err)
    assert entry["signature"] == "***REDACTED***"


def test_lifecycle_logs_are_keyed_by_proposal_id(
    governance: GovernanceEngine, capsys: pytest.CaptureFixture[str]
) -> None:
    configure_logging("INFO")

    proposal_id = governance.create_proposal(
        "alice",
        "Ship the indexer",
        "Fund the event indexer feature",
        ProposalType.FEATURE,
        7_200,
        10,
        50,
    )
    governance.cast_vote("bob", proposal_id, VoteDirection.UP)

    entries = _log_lines(capsys.readouterr().err)
    by_event = {entry["event"]: entry for entry in entries}
    assert by_event["proposal_created"]["proposal_id"] == proposal_id
    assert by_event["vote_cast"]["proposal_id"] == proposal_id
    assert by_event["vote_cast"]["weight"] == 55
