"""Per-participant score sheets for one event.

A judge types marks per criterion; every keystroke lands here as a raw value.
Invalid input never raises: anything that does not parse as a finite,
non-negative number is stored as 0 so the editor stays usable while a value
is half typed.

Layout:
- CriterionCatalog: ordered criterion labels of an event (no weights).
- ScoreSheet: fixed-size list of criterion scores plus the derived total.
- ScoreSheetStore: lazily created sheets keyed by participant id.
"""
from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Dict, Iterable, Mapping, Tuple

logger = logging.getLogger(__name__)


def coerce_score(value: Any) -> float:
    """Parse a raw criterion mark into a non-negative float.

    Examples:
        - "7.5" -> 7.5
        - 8 -> 8.0
        - "-5" -> 0.0
        - "abc" -> 0.0
        - "" / None -> 0.0
    """
    if value is None or isinstance(value, bool):
        return 0.0
    if isinstance(value, (int, float)):
        parsed = float(value)
    elif isinstance(value, str):
        stripped = value.strip()
        if not stripped:
            return 0.0
        try:
            parsed = float(stripped)
        except ValueError:
            return 0.0
    else:
        return 0.0
    if not math.isfinite(parsed) or parsed < 0:
        return 0.0
    return parsed


@dataclass(frozen=True)
class CriterionCatalog:
    event_name: str
    labels: Tuple[str, ...] = ()

    @classmethod
    def from_labels(cls, event_name: str, labels: Iterable[Any]) -> "CriterionCatalog":
        # Positions must match the backend criteria array, blank labels included.
        cleaned = tuple("" if label is None else str(label).strip() for label in labels)
        return cls(event_name=event_name, labels=cleaned)

    def __len__(self) -> int:
        return len(self.labels)


@dataclass
class ScoreSheet:
    """Criterion scores for one participant; ``total`` is always the sum of ``scores``."""

    participant_id: str
    scores: list[float]
    total: float = 0.0

    @classmethod
    def blank(cls, participant_id: str, criteria_count: int) -> "ScoreSheet":
        return cls(participant_id=participant_id, scores=[0.0] * criteria_count)

    def set(self, criterion_index: int, raw_value: Any) -> float:
        if criterion_index < 0 or criterion_index >= len(self.scores):
            raise IndexError(
                f"criterion index {criterion_index} out of range (0..{len(self.scores) - 1})"
            )
        self.scores[criterion_index] = coerce_score(raw_value)
        return self.recompute_total()

    def recompute_total(self) -> float:
        self.total = float(sum(self.scores))
        return self.total

    def breakdown(self) -> Tuple[float, ...]:
        return tuple(self.scores)


@dataclass
class ScoreSheetStore:
    """All score sheets a judge holds for one event.

    Passed explicitly to the ranking engine instead of living in UI state, so
    ranking the same store twice gives the same result.
    """

    catalog: CriterionCatalog
    _sheets: Dict[str, ScoreSheet] = field(default_factory=dict)
    locked: bool = False

    def set_score(self, participant_id: str, criterion_index: int, raw_value: Any) -> None:
        """Store a sanitized mark and recompute the participant's total.

        Ignored (with a warning) once results for the event were submitted.
        """
        if self.locked:
            logger.warning(
                "Ignoring score for %s on locked event %s", participant_id, self.catalog.event_name
            )
            return
        sheet = self._sheets.get(participant_id)
        if sheet is None:
            sheet = ScoreSheet.blank(participant_id, len(self.catalog))
        total = sheet.set(criterion_index, raw_value)
        # Only keep the sheet once the write succeeded.
        self._sheets[participant_id] = sheet
        logger.debug(
            "Score set: participant=%s criterion=%s raw=%r total=%s",
            participant_id,
            criterion_index,
            raw_value,
            total,
        )

    def get_total(self, participant_id: str) -> float:
        sheet = self._sheets.get(participant_id)
        return sheet.total if sheet is not None else 0.0

    def get_sheet(self, participant_id: str) -> ScoreSheet | None:
        return self._sheets.get(participant_id)

    def has_sheet(self, participant_id: str) -> bool:
        return participant_id in self._sheets

    def snapshot(self) -> Mapping[str, float]:
        """Read-only participant_id -> total mapping of the current state."""
        return MappingProxyType({pid: sheet.total for pid, sheet in self._sheets.items()})

    def lock(self) -> None:
        self.locked = True

    def unlock(self) -> None:
        self.locked = False

    def __len__(self) -> int:
        return len(self._sheets)

    def __contains__(self, participant_id: object) -> bool:
        return participant_id in self._sheets
