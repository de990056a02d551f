from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any, Protocol

from dao_governance.types import JsonDict


class EventTopic(StrEnum):
    CONTRACT_INITIALIZED = "contract_initialized"
    CONFIG_UPDATED = "config_updated"
    PROPOSAL_CREATED = "proposal_created"
    VOTE_CAST = "vote_cast"
    PROPOSAL_FINALIZED = "proposal_finalized"
    PROPOSAL_EXECUTED = "proposal_executed"


@dataclass(slots=True, frozen=True)
class GovernanceEvent:
    topic: EventTopic
    data: JsonDict = field(default_factory=dict)

    def as_dict(self) -> dict[str, Any]:
        return {"topic": self.topic.value, "data": dict(self.data)}


def contract_initialized() -> GovernanceEvent:
    return GovernanceEvent(EventTopic.CONTRACT_INITIALIZED)


def config_updated() -> GovernanceEvent:
    return GovernanceEvent(EventTopic.CONFIG_UPDATED)


def proposal_created(proposal_id: int, proposer: str) -> GovernanceEvent:
    return GovernanceEvent(
        EventTopic.PROPOSAL_CREATED,
        {"proposal_id": proposal_id, "proposer": proposer},
    )


def vote_cast(proposal_id: int, voter: str, is_upvote: bool) -> GovernanceEvent:
    return GovernanceEvent(
        EventTopic.VOTE_CAST,
        {"proposal_id": proposal_id, "voter": voter, "is_upvote": is_upvote},
    )


def proposal_finalized(proposal_id: int, approved: bool) -> GovernanceEvent:
    return GovernanceEvent(
        EventTopic.PROPOSAL_FINALIZED,
        {"proposal_id": proposal_id, "approved": approved},
    )


def proposal_executed(proposal_id: int) -> GovernanceEvent:
    return GovernanceEvent(EventTopic.PROPOSAL_EXECUTED, {"proposal_id": proposal_id})


class EventLog(Protocol):
    def publish(self, event: GovernanceEvent) -> None:
        ...


class InMemoryEventLog:
    def __init__(self) -> None:
        self._events: list[GovernanceEvent] = []

    def publish(self, event: GovernanceEvent) -> None:
        self._events.append(event)

    @property
    def events(self) -> tuple[GovernanceEvent, ...]:
        return tuple(self._events)

    def topics(self) -> list[EventTopic]:
        return [event.topic for event in self._events]

    def of_topic(self, topic: EventTopic) -> list[GovernanceEvent]:
        return [event for event in self._events if event.topic == topic]
