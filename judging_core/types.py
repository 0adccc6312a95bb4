"""Type definitions for participation records and winner payloads."""
from __future__ import annotations

from typing import List, Optional, TypedDict


class TeamMember(TypedDict, total=False):
    """A team member entry on a participation record."""
    email: str
    name: str
    status: str  # 'pending' | 'accepted' | 'rejected'


class ParticipationRecord(TypedDict, total=False):
    """
    TypedDict representing a participation record as served by the backend.

    All fields are optional (total=False) because the list endpoints omit
    whatever the registration form did not collect.
    """
    _id: str
    name: str
    email: Optional[str]
    department: str
    year: str
    contactNumber: Optional[str]
    team_name: Optional[str]
    eventName: str
    date: str  # ISO timestamp
    attendance: bool
    marks: float  # Persisted total, never the breakdown
    team_members: List[TeamMember]


class EventRecord(TypedDict, total=False):
    """Event document; only the fields the scoring engine reads."""
    _id: str
    name: str
    date: str
    criteria: List[str]


class WinnerRecord(TypedDict, total=False):
    """One entry of the winner batch posted to the winners endpoint."""
    name: str
    eventName: str
    rank: int  # 1, 2 or 3
    date: Optional[str]  # YYYY-MM-DD


class MarksRecord(TypedDict, total=False):
    """Body of the per-participant marks update."""
    marks: float
    breakdown: List[float]
