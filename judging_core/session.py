"""Judging session for one event: load, score, save, rank, submit.

Lifecycle:
- load(): criteria + attended participants from the participation source
- set_score(): judge edits, sanitized and totalled by the ScoreSheetStore
- save_marks(): persist one participant's total (and breakdown) on request
- rank()/winners(): pure, recomputed from the current store every call
- submit(): publish the podium as one batch; lock editing only on success
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from typing import Any, List, Optional

from .publisher import (
    MarksSink,
    ParticipationSource,
    PublishOutcome,
    SubmissionError,
    WinnerPublisher,
)
from .ranking import Participant, RankedEntry, Winner, rank_event, resolve_totals, select_winners
from .scoresheet import CriterionCatalog, ScoreSheetStore
from .validation import MarksPayload, PayloadValidator

logger = logging.getLogger(__name__)


@dataclass
class JudgingSession:
    event_name: str
    catalog: CriterionCatalog
    participants: List[Participant] = field(default_factory=list)
    store: Optional[ScoreSheetStore] = None

    def __post_init__(self) -> None:
        if self.store is None:
            self.store = ScoreSheetStore(catalog=self.catalog)

    @classmethod
    async def load(cls, source: ParticipationSource, event_name: str) -> "JudgingSession":
        criteria = await source.fetch_criteria(event_name)
        participants = await source.fetch_attended(event_name)
        catalog = CriterionCatalog.from_labels(event_name, criteria)
        logger.info(
            "Loaded %s: %d criteria, %d attended participants",
            event_name,
            len(catalog),
            len(participants),
        )
        return cls(event_name=event_name, catalog=catalog, participants=list(participants))

    @property
    def locked(self) -> bool:
        return self.store.locked

    def set_score(self, participant_id: str, criterion_index: int, raw_value: Any) -> None:
        self.store.set_score(participant_id, criterion_index, raw_value)

    def get_total(self, participant_id: str) -> float:
        if self.store.has_sheet(participant_id):
            return self.store.get_total(participant_id)
        for participant in self.participants:
            if participant.id == participant_id:
                return float(participant.persisted_marks)
        return 0.0

    def marks_payload(self, participant_id: str) -> MarksPayload:
        sheet = self.store.get_sheet(participant_id)
        if sheet is None:
            raise LookupError(f"No marks entered for {participant_id}")
        return PayloadValidator.validate_marks(
            participant_id, sheet.total, list(sheet.breakdown())
        )

    async def save_marks(self, sink: MarksSink, participant_id: str) -> MarksPayload:
        """Persist one participant's marks; the participant snapshot picks up the new total.

        Raises:
            LookupError: nothing was entered for this participant
            SubmissionError: the marks sink failed
        """
        payload = self.marks_payload(participant_id)
        try:
            await sink.save_marks(payload)
        except Exception as e:
            logger.error("Saving marks for %s failed: %s", participant_id, e)
            raise SubmissionError(self.event_name, f"Saving marks failed: {e}") from e
        self.participants = [
            replace(p, persisted_marks=payload.total) if p.id == participant_id else p
            for p in self.participants
        ]
        return payload

    def rank(self) -> List[RankedEntry]:
        return rank_event(
            self.participants, resolve_totals(self.participants, self.store), self.event_name
        )

    def winners(self) -> List[Winner]:
        return select_winners(self.participants, self.store, self.event_name)

    async def submit(self, publisher: WinnerPublisher) -> PublishOutcome:
        """Rank the current snapshot and publish it.

        Raises:
            RuntimeError: results for this event were already submitted
            SubmissionError: publishing failed; the session stays editable
        """
        if self.store.locked:
            raise RuntimeError(f"Results for {self.event_name} were already submitted")
        outcome = await publisher.publish(self.event_name, self.winners())
        self.store.lock()
        return outcome

