"""
Payload validation for marks updates and winner batches using Pydantic v2
"""

import logging
import math
import re
from typing import List, Optional, Self

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
    field_validator,
    model_validator,
)

logger = logging.getLogger(__name__)

# ==================== MODELS ====================


class MarksPayload(BaseModel):
    """Per-participant marks update sent to the marks sink"""

    participant_id: str = Field(..., min_length=1, max_length=64)
    total: float = Field(..., ge=0.0, description="Sum of criterion scores")
    breakdown: List[float] = Field(
        default_factory=list, description="Criterion scores in catalog order"
    )

    @field_validator("breakdown")
    @classmethod
    def validate_breakdown(cls, v: List[float]) -> List[float]:
        """Every criterion score must be finite and non-negative"""
        for i, score in enumerate(v):
            if not math.isfinite(score) or score < 0:
                raise ValueError(f"breakdown[{i}] must be a non-negative number")
        return v

    @model_validator(mode="after")
    def validate_total_matches_breakdown(self) -> Self:
        """Total must be the sum of the breakdown when one is given"""
        if self.breakdown and not math.isclose(
            sum(self.breakdown), self.total, rel_tol=1e-9, abs_tol=1e-9
        ):
            raise ValueError("total must equal the sum of breakdown")
        return self

    model_config = ConfigDict(frozen=True)


class WinnerModel(BaseModel):
    """One published winner"""

    name: str = Field(..., min_length=1, max_length=255)
    eventName: str = Field(..., min_length=1, max_length=255)
    rank: int = Field(..., ge=1, le=3, description="Podium rank (1-3)")
    date: Optional[str] = Field(None, description="Event date (YYYY-MM-DD)")

    @field_validator("name", "eventName")
    @classmethod
    def strip_text(cls, v: str) -> str:
        v = v.strip()
        if len(v) == 0:
            raise ValueError("must not be blank")
        return v

    @field_validator("date")
    @classmethod
    def validate_date(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return v
        if not re.fullmatch(r"\d{4}-\d{2}-\d{2}", v):
            raise ValueError("date must be YYYY-MM-DD")
        return v

    model_config = ConfigDict(frozen=True)


class WinnerBatch(BaseModel):
    """Winner list for exactly one event"""

    winners: List[WinnerModel]

    @model_validator(mode="after")
    def validate_single_event(self) -> Self:
        events = {w.eventName for w in self.winners}
        if len(events) > 1:
            raise ValueError(f"winner batch spans several events: {sorted(events)}")
        return self

    @model_validator(mode="after")
    def validate_rank_order(self) -> Self:
        ranks = [w.rank for w in self.winners]
        if ranks != sorted(ranks):
            raise ValueError("winners must be ordered by rank")
        return self

    def to_records(self) -> List[dict]:
        return [w.model_dump(exclude_none=True) for w in self.winners]


# ==================== HELPERS ====================


class PayloadValidator:
    """Converts pydantic failures into ValueError for callers"""

    @staticmethod
    def validate_winner_batch(records: List[dict]) -> WinnerBatch:
        """
        Validate a winner batch before submission

        Returns:
            WinnerBatch: Validated batch

        Raises:
            ValueError: If validation fails
        """
        try:
            return WinnerBatch(winners=records)
        except ValidationError as e:
            logger.warning(f"Winner batch validation failed: {e}")
            raise ValueError(f"Invalid winner batch: {str(e)}")

    @staticmethod
    def validate_marks(
        participant_id: str, total: float, breakdown: List[float]
    ) -> MarksPayload:
        try:
            return MarksPayload(
                participant_id=participant_id, total=total, breakdown=breakdown
            )
        except ValidationError as e:
            logger.warning(f"Marks validation failed for {participant_id}: {e}")
            raise ValueError(f"Invalid marks: {str(e)}")


# ==================== EXPORT ====================

__all__ = [
    "MarksPayload",
    "WinnerModel",
    "WinnerBatch",
    "PayloadValidator",
]
