"""Client for the external AI schedule-image parser.

The parser is a hosted service: it receives a photo of a timetable as a data
URI and answers ``{"dayOfWeek": ..., "schedules": [{subject, startTime, endTime}]}``.
"""

from __future__ import annotations

import base64
import io
import logging
from typing import Any, Optional, Protocol

import requests
from PIL import Image, UnidentifiedImageError

from ..core.exceptions import ScheduleParseError, ValidationError
from .model import ParsedSchedule, ParsedScheduleEntry

logger = logging.getLogger(__name__)


def build_data_uri(image_bytes: bytes) -> str:
    """Encode an uploaded image as ``data:<mimetype>;base64,<payload>``."""

    if not image_bytes:
        raise ValidationError("Please upload an image first.")
    try:
        with Image.open(io.BytesIO(image_bytes)) as img:
            mime = Image.MIME.get(img.format or "")
    except (UnidentifiedImageError, OSError):
        raise ValidationError("The uploaded file is not a readable image.") from None
    if not mime:
        raise ValidationError("Unsupported image format.")

    payload = base64.b64encode(image_bytes).decode("ascii")
    return f"data:{mime};base64,{payload}"


class ScheduleParser(Protocol):
    def parse(self, photo_data_uri: str) -> ParsedSchedule:
        raise NotImplementedError


def parse_output(data: Any) -> ParsedSchedule:
    """Validate the parser's JSON answer into a ParsedSchedule."""

    if not isinstance(data, dict):
        raise ScheduleParseError("Failed to get a response from the AI model.")

    rows = data.get("schedules")
    if not isinstance(rows, list):
        raise ScheduleParseError("Schedule parser returned no schedule list.")

    entries = []
    for row in rows:
        if not isinstance(row, dict):
            raise ScheduleParseError("Schedule parser returned a malformed row.")
        entries.append(
            ParsedScheduleEntry(
                subject=str(row.get("subject") or "").strip(),
                start_time=str(row.get("startTime") or "").strip(),
                end_time=str(row.get("endTime") or "").strip(),
            )
        )

    return ParsedSchedule(day_of_week=str(data.get("dayOfWeek") or "").strip(), entries=entries)


class HttpScheduleParser:
    """POSTs the photo to the configured parser endpoint using ``requests``."""

    def __init__(
        self,
        url: str,
        *,
        api_key: Optional[str] = None,
        timeout: float = 60.0,
        session: Optional[requests.Session] = None,
    ):
        self._url = url
        self._api_key = api_key
        self._timeout = timeout
        self._session = session or requests.Session()

    def parse(self, photo_data_uri: str) -> ParsedSchedule:
        if not self._url:
            raise ScheduleParseError("Schedule parser is not configured.")

        headers = {"Accept": "application/json"}
        if self._api_key:
            headers["Authorization"] = f"Bearer {self._api_key}"

        try:
            response = self._session.post(
                self._url,
                json={"photoDataUri": photo_data_uri},
                headers=headers,
                timeout=self._timeout,
            )
            response.raise_for_status()
            data = response.json()
        except requests.RequestException as e:
            logger.error("Schedule parser request failed: %s", e)
            raise ScheduleParseError("Could not parse schedule from image.") from e
        except ValueError as e:
            logger.error("Schedule parser answered with invalid JSON: %s", e)
            raise ScheduleParseError("Failed to get a response from the AI model.") from e

        # Some deployments wrap the flow result as {"output": {...}}.
        if isinstance(data, dict) and isinstance(data.get("output"), dict):
            data = data["output"]
        return parse_output(data)
