"""Event ranking engine (standard competition ranking, podium cut-off).

Single source of truth for who placed where in an event:
- Only attended participants of the target event are ranked.
- Order: total descending, participant id ascending for equal totals.
- Equal totals share a rank; the next lower total is ranked one plus the
  number of participants above it ("1224" ranking).
- Ranking stops at the first rank beyond the podium; a tie group that starts
  on the podium is always emitted whole.
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Mapping, Optional, Sequence

from .scoresheet import ScoreSheetStore

PODIUM_PLACES = 3


@dataclass(frozen=True)
class Participant:
    id: str
    name: str
    event_name: str
    attended: bool = False
    team_name: Optional[str] = None
    date: Optional[str] = None
    # Total already stored on the participation record (0 if never saved).
    persisted_marks: float = 0.0

    @property
    def display_name(self) -> str:
        return self.team_name or self.name


@dataclass(frozen=True)
class RankedEntry:
    participant_id: str
    name: str
    event_name: str
    rank: int
    total: float


@dataclass(frozen=True)
class Winner:
    name: str
    event_name: str
    rank: int
    date: Optional[str] = None

    def to_record(self) -> dict:
        record = {"name": self.name, "eventName": self.event_name, "rank": self.rank}
        if self.date is not None:
            record["date"] = self.date
        return record


def format_event_date(value: object) -> Optional[str]:
    """Normalize an event date to YYYY-MM-DD, or None when it cannot be read."""
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date().isoformat()
    if isinstance(value, date):
        return value.isoformat()
    if isinstance(value, str):
        stripped = value.strip()
        if not stripped:
            return None
        try:
            return datetime.fromisoformat(stripped.replace("Z", "+00:00")).date().isoformat()
        except ValueError:
            return None
    return None


def resolve_totals(
    participants: Sequence[Participant],
    store: ScoreSheetStore | None,
) -> dict[str, float]:
    """Total per participant: the in-memory sheet if any, else the persisted marks."""
    totals: dict[str, float] = {}
    for participant in participants:
        if store is not None and store.has_sheet(participant.id):
            totals[participant.id] = store.get_total(participant.id)
        else:
            totals[participant.id] = float(participant.persisted_marks or 0.0)
    return totals


def _eligible(participants: Sequence[Participant], event_name: str) -> list[Participant]:
    return [p for p in participants if p.attended and p.event_name == event_name]


def rank_event(
    participants: Sequence[Participant],
    totals: Mapping[str, float],
    event_name: str,
    podium_places: int = PODIUM_PLACES,
) -> list[RankedEntry]:
    """
    Rank the attended participants of one event.

    Args:
      participants: participant snapshot, may span several events.
      totals: mapping participant_id -> total; missing ids count as 0.
      event_name: event to rank.
      podium_places: last rank that is still emitted (capped at PODIUM_PLACES).
    """
    podium_places = max(1, min(int(podium_places or PODIUM_PLACES), PODIUM_PLACES))
    eligible = _eligible(participants, event_name)
    ordered = sorted(
        eligible,
        key=lambda p: (-float(totals.get(p.id, 0.0)), p.id),
    )

    entries: list[RankedEntry] = []
    rank = 1
    group_size = 0
    previous_total: float | None = None
    for participant in ordered:
        total = float(totals.get(participant.id, 0.0))
        if previous_total is not None and total < previous_total:
            rank += group_size
            group_size = 1
        else:
            group_size += 1
        previous_total = total
        if rank > podium_places:
            break
        entries.append(
            RankedEntry(
                participant_id=participant.id,
                name=participant.display_name,
                event_name=participant.event_name,
                rank=rank,
                total=total,
            )
        )
    return entries


def select_winners(
    participants: Sequence[Participant],
    store: ScoreSheetStore | None,
    event_name: str,
) -> list[Winner]:
    """Podium winners of ``event_name`` computed from the current sheet snapshot."""
    by_id = {p.id: p for p in participants}
    totals = resolve_totals(participants, store)
    return [
        Winner(
            name=entry.name,
            event_name=entry.event_name,
            rank=entry.rank,
            date=format_event_date(by_id[entry.participant_id].date),
        )
        for entry in rank_event(participants, totals, event_name)
    ]
