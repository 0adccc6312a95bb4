from .scoresheet import CriterionCatalog, ScoreSheet, ScoreSheetStore, coerce_score
from .ranking import (
    PODIUM_PLACES,
    Participant,
    RankedEntry,
    Winner,
    format_event_date,
    rank_event,
    resolve_totals,
    select_winners,
)
from .publisher import (
    InMemoryMarksSink,
    InMemoryParticipationSource,
    InMemoryWinnerSink,
    MarksSink,
    ParticipationSource,
    PublishOutcome,
    SubmissionError,
    WinnerPublisher,
    WinnerSink,
    participant_from_record,
    participants_from_records,
)
from .session import JudgingSession
from .types import EventRecord, MarksRecord, ParticipationRecord, WinnerRecord
from .validation import MarksPayload, PayloadValidator, WinnerBatch, WinnerModel

__all__ = [
    "CriterionCatalog",
    "ScoreSheet",
    "ScoreSheetStore",
    "coerce_score",
    "PODIUM_PLACES",
    "Participant",
    "RankedEntry",
    "Winner",
    "format_event_date",
    "rank_event",
    "resolve_totals",
    "select_winners",
    "InMemoryMarksSink",
    "InMemoryParticipationSource",
    "InMemoryWinnerSink",
    "MarksSink",
    "ParticipationSource",
    "PublishOutcome",
    "SubmissionError",
    "WinnerPublisher",
    "WinnerSink",
    "participant_from_record",
    "participants_from_records",
    "JudgingSession",
    "EventRecord",
    "MarksRecord",
    "ParticipationRecord",
    "WinnerRecord",
    "MarksPayload",
    "PayloadValidator",
    "WinnerBatch",
    "WinnerModel",
]
