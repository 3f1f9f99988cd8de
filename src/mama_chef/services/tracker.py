"""Meal tracker flow: photo analysis and dashboard summaries."""

import json
import logging
from dataclasses import dataclass
from datetime import date, datetime
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from mama_chef.domain.errors import InvalidTimezone, MalformedPayload
from mama_chef.domain.nutrition import (
    EnergySlice,
    MacroProgress,
    MacroTotals,
    RecognizedItem,
    SavedMeal,
)
from mama_chef.services.gateway import GenerateRequest, ModelGateway
from mama_chef.services.inline_data import decode_data_url, to_request_part
from mama_chef.services.prompts import TRACKER_PROMPT, TRACKER_SCHEMA
from mama_chef.services.reconciliation import energy_split, progress
from mama_chef.services.sessions import Session

_logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TrackerSummary:
    """Dashboard figures for one day."""

    day: date
    today: MacroTotals
    progress: list[MacroProgress]
    energy: list[EnergySlice]
    batch: MacroTotals


@dataclass
class TrackerService:
    """Runs schema-constrained photo analysis and feeds the engine."""

    gateway: ModelGateway
    model: str

    async def analyze(
        self, session: Session, image_data_url: str
    ) -> list[RecognizedItem]:
        """Recognize foods on a photo and replace the session's batch."""
        image = decode_data_url(image_data_url)
        request = GenerateRequest(
            model=self.model,
            contents=[
                {
                    "role": "user",
                    "parts": [to_request_part(image), {"text": TRACKER_PROMPT}],
                }
            ],
            response_schema=TRACKER_SCHEMA,
        )
        raw = await self.gateway.generate(request)
        try:
            payload = json.loads(raw)
        except json.JSONDecodeError as exc:
            _logger.warning("Recognition reply is not JSON: %s", raw[:200])
            raise MalformedPayload("Recognition reply is not valid JSON") from exc
        items = session.engine.ingest(payload)
        session.pending_image = image_data_url
        return items

    def commit(
        self, session: Session, *, confirm_low_confidence: bool = False
    ) -> SavedMeal:
        """Save the included items together with the analyzed photo."""
        meal = session.engine.commit(
            session.pending_image,
            confirm_low_confidence=confirm_low_confidence,
        )
        session.pending_image = None
        return meal

    def summary(
        self, session: Session, timezone_name: str = "UTC"
    ) -> TrackerSummary:
        """Return today's totals against the session's targets."""
        try:
            tz = ZoneInfo(timezone_name)
        except (ZoneInfoNotFoundError, ValueError) as exc:
            raise InvalidTimezone(f"Unknown timezone: {timezone_name}") from exc
        day = datetime.now(tz=tz).date()
        today = session.engine.daily_totals(day, tz)
        return TrackerSummary(
            day=day,
            today=today,
            progress=progress(today, session.tracker_profile.targets),
            energy=energy_split(today),
            batch=session.engine.batch_totals(),
        )
