"""Borrow-duration parsing.

Accepted forms, tried in order:

- ``"2024-01-01 to 2024-01-10"``: explicit date range, due at the end date
- ``"P14D"``, ``"PT48H"``, ``"P48H"``: restricted ISO-8601 durations
- ``"10 days"``, ``"2 weeks"``, ``"36h"``: natural-language shorthand
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Optional

from libranet.exceptions import InvalidInputError

DATE_FORMAT = "%Y-%m-%d"

_RANGE_RE = re.compile(r"(\d{4}-\d{2}-\d{2})\s+to\s+(\d{4}-\d{2}-\d{2})", re.IGNORECASE)
_ISO_RE = re.compile(r"^P(?:(\d+)D|T?(\d+)H)$", re.IGNORECASE)
_NATURAL_RE = re.compile(r"^\s*(\d+)\s*(days?|d|weeks?|w|hours?|h)\s*$", re.IGNORECASE)

SUPPORTED_FORMATS = "'10 days', '2 weeks', 'P14D', 'PT48H', 'YYYY-MM-DD to YYYY-MM-DD'"


@dataclass(frozen=True)
class BorrowDuration:
    """Either a fixed end date or a length relative to the borrow start."""

    length: timedelta = timedelta(0)
    end: Optional[datetime] = None

    @property
    def is_explicit_range(self) -> bool:
        return self.end is not None

    @classmethod
    def parse(cls, text: str) -> "BorrowDuration":
        s = (text or "").strip()
        if not s:
            raise InvalidInputError("Empty duration string")

        match = _RANGE_RE.search(s)
        if match:
            try:
                start = datetime.strptime(match.group(1), DATE_FORMAT)
                end = datetime.strptime(match.group(2), DATE_FORMAT)
            except ValueError as exc:
                raise InvalidInputError("Invalid date format in range") from exc
            if end <= start:
                raise InvalidInputError("End date must be after start date")
            return cls(end=end)

        try:
            match = _ISO_RE.match(s)
            if match:
                days, hours = match.groups()
                if days is not None:
                    return cls(length=timedelta(days=int(days)))
                return cls(length=timedelta(hours=int(hours)))

            match = _NATURAL_RE.match(s)
            if match:
                return cls(length=cls._natural_length(int(match.group(1)), match.group(2)))
        except InvalidInputError:
            raise
        except (OverflowError, ValueError) as exc:
            # timedelta caps at 999999999 days; int() refuses very long digit strings
            raise InvalidInputError("Duration too large") from exc

        raise InvalidInputError(f"Unsupported duration format. Supported: {SUPPORTED_FORMATS}")

    @staticmethod
    def _natural_length(count: int, unit: str) -> timedelta:
        unit = unit.lower()
        if unit.startswith("w"):
            return timedelta(hours=24 * 7 * count)
        if unit.startswith("d"):
            return timedelta(hours=24 * count)
        if unit.startswith("h"):
            return timedelta(hours=count)
        raise InvalidInputError("Unsupported duration unit")

    def compute_due_at(self, borrow_start: Optional[datetime] = None) -> datetime:
        if self.end is not None:
            return self.end
        if borrow_start is None:
            borrow_start = datetime.now()
        try:
            return borrow_start + self.length
        except OverflowError as exc:
            raise InvalidInputError("Duration too large") from exc
