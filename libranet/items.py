from __future__ import annotations

import logging
from datetime import datetime, timedelta
from enum import Enum
from typing import Dict, List, Optional

from libranet.exceptions import AlreadyArchivedError, InvalidInputError
from libranet.utils.validators import DEFAULT_AUTHOR, IdValidator, TextValidator

logger = logging.getLogger(__name__)


class AvailabilityStatus(str, Enum):
    AVAILABLE = "AVAILABLE"
    BORROWED = "BORROWED"
    RESERVED = "RESERVED"
    MAINTENANCE = "MAINTENANCE"


class Item:
    """A single lendable unit in the catalogue.

    Concrete variants set ``type_name`` and override :meth:`validate`, which
    runs at construction so an invalid item never exists.
    """

    type_name = "Item"

    def __init__(self, item_id: int, title: str, authors: Optional[List[str]] = None,
                 metadata: Optional[Dict[str, str]] = None) -> None:
        self.id = IdValidator.require_positive(item_id, "Item id")
        self.title = TextValidator.clean_title(title)
        self.authors: List[str] = [a.strip() for a in (authors or []) if a and a.strip()] or [DEFAULT_AUTHOR]
        self.status = AvailabilityStatus.AVAILABLE
        self.metadata: Dict[str, str] = dict(metadata or {})
        self.validate()

    def validate(self) -> None:
        """Variant-specific invariants; raise InvalidInputError when broken."""

    @property
    def is_available(self) -> bool:
        return self.status is AvailabilityStatus.AVAILABLE

    def __str__(self) -> str:  # pragma: no cover - string formatting trivial
        return f"{self.id} - {self.title} by {', '.join(self.authors)} ({self.type_name})"

    def __repr__(self) -> str:  # pragma: no cover
        return f"<{self.type_name} id={self.id} title={self.title!r} status={self.status.value}>"

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "type": self.type_name,
            "title": self.title,
            "authors": list(self.authors),
            "status": self.status.value,
            "metadata": dict(self.metadata),
        }


class Book(Item):
    type_name = "Book"

    def __init__(self, item_id: int, title: str, authors: Optional[List[str]] = None, page_count: int = 0,
                 metadata: Optional[Dict[str, str]] = None) -> None:
        self.page_count = page_count
        super().__init__(item_id, title, authors, metadata)

    def validate(self) -> None:
        if self.page_count <= 0:
            raise InvalidInputError("Book page count must be > 0")

    def to_dict(self) -> dict:
        data = super().to_dict()
        data["page_count"] = self.page_count
        return data


class PlaybackState(str, Enum):
    STOPPED = "STOPPED"
    PLAYING = "PLAYING"
    PAUSED = "PAUSED"


class Playback:
    """Transport controls for playable media, bounded by the media length."""

    def __init__(self, length: timedelta) -> None:
        self.length = length
        self.state = PlaybackState.STOPPED
        self.position = timedelta(0)

    @property
    def is_playing(self) -> bool:
        return self.state is PlaybackState.PLAYING

    def play(self) -> None:
        self.state = PlaybackState.PLAYING

    def pause(self) -> None:
        if self.state is PlaybackState.PLAYING:
            self.state = PlaybackState.PAUSED

    def stop(self) -> None:
        self.state = PlaybackState.STOPPED
        self.position = timedelta(0)

    def seek(self, position: timedelta) -> None:
        if position < timedelta(0) or position > self.length:
            raise InvalidInputError("Seek position out of range")
        self.position = position


class Audiobook(Item):
    type_name = "Audiobook"

    def __init__(self, item_id: int, title: str, authors: Optional[List[str]] = None,
                 playback_duration: timedelta = timedelta(0), narrator: str = "",
                 metadata: Optional[Dict[str, str]] = None) -> None:
        self.playback_duration = playback_duration
        self.narrator = (narrator or "").strip()
        super().__init__(item_id, title, authors, metadata)
        self.player = Playback(playback_duration)

    def validate(self) -> None:
        if self.playback_duration <= timedelta(0):
            raise InvalidInputError("Audiobook duration must be positive")

    def to_dict(self) -> dict:
        data = super().to_dict()
        data["playback_hours"] = self.playback_duration.total_seconds() / 3600
        data["narrator"] = self.narrator
        return data


class EMagazine(Item):
    type_name = "EMagazine"

    def __init__(self, item_id: int, title: str, authors: Optional[List[str]] = None, issue_number: int = 0,
                 issue_date: Optional[datetime] = None, metadata: Optional[Dict[str, str]] = None) -> None:
        self.issue_number = issue_number
        self.issue_date = issue_date or datetime.now()
        self._archived = False
        super().__init__(item_id, title, authors, metadata)

    def validate(self) -> None:
        if self.issue_number <= 0:
            raise InvalidInputError("Issue number must be > 0")

    @property
    def archived(self) -> bool:
        return self._archived

    def archive_issue(self) -> None:
        if self._archived:
            raise AlreadyArchivedError("Issue already archived")
        self._archived = True
        self.status = AvailabilityStatus.MAINTENANCE
        logger.debug("Magazine %s issue %s archived", self.id, self.issue_number)

    def to_dict(self) -> dict:
        data = super().to_dict()
        data["issue_number"] = self.issue_number
        data["issue_date"] = self.issue_date.date().isoformat()
        data["archived"] = self._archived
        return data

