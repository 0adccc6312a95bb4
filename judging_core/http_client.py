"""
Backend REST collaborators over httpx.

Routes (campus backend):
- GET  /api/events/{name}                      -> {"event": {"criteria": [...]}}
- GET  /api/participation/present?eventNames=  -> [participation records]
- PUT  /api/participation/{id}/marks           <- {"marks": total, "breakdown": [...]}
- POST /api/winners                            <- [winner records]
- GET  /api/winners                            -> [winner records]
"""

from __future__ import annotations

import logging
from typing import List, Optional
from urllib.parse import quote

import httpx

from .config import Settings, get_settings
from .publisher import participants_from_records
from .ranking import Participant
from .types import EventRecord, MarksRecord, WinnerRecord
from .validation import MarksPayload

logger = logging.getLogger(__name__)

SESSION_COOKIE_NAME = "connect.sid"


class BackendClient:
    """Implements ParticipationSource, MarksSink and WinnerSink against the backend."""

    def __init__(
        self,
        settings: Optional[Settings] = None,
        client: Optional[httpx.AsyncClient] = None,
    ):
        self.settings = settings or get_settings()
        self._owns_client = client is None
        if client is None:
            cookies = {}
            if self.settings.SESSION_COOKIE:
                cookies[SESSION_COOKIE_NAME] = self.settings.SESSION_COOKIE
            client = httpx.AsyncClient(
                base_url=self.settings.API_BASE_URL,
                timeout=self.settings.REQUEST_TIMEOUT_SECONDS,
                cookies=cookies,
            )
        self.client = client

    async def __aenter__(self) -> "BackendClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_client:
            await self.client.aclose()

    async def fetch_criteria(self, event_name: str) -> List[str]:
        response = await self.client.get(f"/api/events/{quote(event_name, safe='')}")
        response.raise_for_status()
        body = response.json()
        event: EventRecord | None = body.get("event") if isinstance(body, dict) else None
        if not isinstance(event, dict):
            logger.warning(f"Event {event_name} returned no event object")
            return []
        criteria = event.get("criteria") or []
        if not isinstance(criteria, list):
            logger.warning(f"Event {event_name} returned malformed criteria: {criteria!r}")
            return []
        return ["" if c is None else str(c) for c in criteria]

    async def fetch_attended(self, event_name: str) -> List[Participant]:
        response = await self.client.get(
            "/api/participation/present", params={"eventNames": event_name}
        )
        # The backend answers 404 when nobody attended.
        if response.status_code == 404:
            return []
        response.raise_for_status()
        records = response.json()
        if not isinstance(records, list):
            logger.warning(f"Participation list for {event_name} is not a list")
            return []
        participants = participants_from_records(records)
        return [p for p in participants if p.attended and p.event_name == event_name]

    async def save_marks(self, payload: MarksPayload) -> None:
        body: MarksRecord = {"marks": payload.total, "breakdown": list(payload.breakdown)}
        response = await self.client.put(
            f"/api/participation/{quote(payload.participant_id, safe='')}/marks", json=body
        )
        response.raise_for_status()
        logger.debug(f"Saved marks for {payload.participant_id}: {payload.total}")

    async def save_winners(self, records: List[WinnerRecord]) -> None:
        # Whole batch in one request; the backend inserts it with insertMany.
        response = await self.client.post("/api/winners", json=list(records))
        response.raise_for_status()

    async def list_winners(self) -> List[WinnerRecord]:
        response = await self.client.get("/api/winners")
        response.raise_for_status()
        records = response.json() or []
        return sorted(records, key=lambda r: r.get("rank", 0))
