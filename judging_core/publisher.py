"""Winner and marks publication.

The engine talks to persistence through three narrow collaborators:
- ParticipationSource: criteria and attended participants of an event.
- MarksSink: one participant's total (plus breakdown) when a judge saves.
- WinnerSink: the podium of one event, accepted or rejected as a whole.

WinnerPublisher never writes winners one by one; a sink failure leaves
nothing committed and surfaces as SubmissionError so the judge can retry.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List, Protocol, Sequence

from .ranking import Participant, Winner
from .scoresheet import coerce_score
from .types import ParticipationRecord, WinnerRecord
from .validation import MarksPayload, PayloadValidator

logger = logging.getLogger(__name__)


class SubmissionError(Exception):
    """Persistence collaborator unreachable or rejected the write; safe to retry."""

    def __init__(self, event_name: str, message: str):
        super().__init__(message)
        self.event_name = event_name


class ParticipationSource(Protocol):
    async def fetch_criteria(self, event_name: str) -> List[str]:
        ...

    async def fetch_attended(self, event_name: str) -> List[Participant]:
        ...


class MarksSink(Protocol):
    async def save_marks(self, payload: MarksPayload) -> None:
        ...


class WinnerSink(Protocol):
    async def save_winners(self, records: List[WinnerRecord]) -> None:
        ...

    async def list_winners(self) -> List[WinnerRecord]:
        ...


@dataclass(frozen=True)
class PublishOutcome:
    """Result of a winner submission."""

    event_name: str
    records: tuple[WinnerRecord, ...]
    submitted: bool


class WinnerPublisher:
    def __init__(self, sink: WinnerSink):
        self.sink = sink

    async def publish(self, event_name: str, winners: Sequence[Winner]) -> PublishOutcome:
        """Validate and submit the winner list of one event as a single batch.

        Raises:
            ValueError: the batch is malformed (wrong event, rank outside 1..3)
            SubmissionError: the sink failed; nothing was committed
        """
        if not winners:
            logger.info("No winners to publish for %s", event_name)
            return PublishOutcome(event_name=event_name, records=(), submitted=False)

        foreign = [w for w in winners if w.event_name != event_name]
        if foreign:
            raise ValueError(
                f"winner batch for {event_name} contains entries of {foreign[0].event_name}"
            )
        batch = PayloadValidator.validate_winner_batch([w.to_record() for w in winners])
        records = batch.to_records()
        try:
            await self.sink.save_winners(records)
        except Exception as e:
            logger.error("Winner submission for %s failed: %s", event_name, e)
            raise SubmissionError(event_name, f"Winner submission failed: {e}") from e
        logger.info("Published %d winners for %s", len(records), event_name)
        return PublishOutcome(event_name=event_name, records=tuple(records), submitted=True)


# ==================== IN-MEMORY COLLABORATORS ====================


def participant_from_record(record: ParticipationRecord) -> Participant:
    """Build a Participant from a backend participation record.

    Raises:
        ValueError: the record has no id, name or event name
    """
    pid = record.get("_id")
    name = record.get("name")
    event_name = record.get("eventName")
    if not pid or not isinstance(name, str) or not name.strip() or not event_name:
        raise ValueError(f"incomplete participation record: {record!r}")
    team_name = record.get("team_name")
    return Participant(
        id=str(pid),
        name=name.strip(),
        event_name=str(event_name),
        attended=bool(record.get("attendance", False)),
        team_name=team_name.strip() if isinstance(team_name, str) and team_name.strip() else None,
        date=record.get("date"),
        persisted_marks=coerce_score(record.get("marks")),
    )


def participants_from_records(records: Sequence[ParticipationRecord]) -> List[Participant]:
    """Parse a list of records, skipping the ones that cannot be read."""
    participants: List[Participant] = []
    for record in records:
        if not isinstance(record, dict):
            logger.warning("Skipping participation record that is not an object: %r", record)
            continue
        try:
            participants.append(participant_from_record(record))
        except ValueError as e:
            logger.warning("Skipping participation record: %s", e)
    return participants


@dataclass
class InMemoryParticipationSource:
    criteria: dict[str, List[str]] = field(default_factory=dict)
    participants: List[Participant] = field(default_factory=list)

    async def fetch_criteria(self, event_name: str) -> List[str]:
        return list(self.criteria.get(event_name, []))

    async def fetch_attended(self, event_name: str) -> List[Participant]:
        return [p for p in self.participants if p.attended and p.event_name == event_name]


@dataclass
class InMemoryMarksSink:
    saved: dict[str, MarksPayload] = field(default_factory=dict)

    async def save_marks(self, payload: MarksPayload) -> None:
        self.saved[payload.participant_id] = payload


@dataclass
class InMemoryWinnerSink:
    """Stores batches whole; a failing sink can be simulated with ``fail_next``."""

    winners: List[WinnerRecord] = field(default_factory=list)
    fail_next: int = 0
    calls: int = 0

    async def save_winners(self, records: List[WinnerRecord]) -> None:
        self.calls += 1
        if self.fail_next > 0:
            self.fail_next -= 1
            raise ConnectionError("winner store unavailable")
        self.winners.extend(dict(r) for r in records)

    async def list_winners(self) -> List[WinnerRecord]:
        return sorted(self.winners, key=lambda r: r["rank"])
