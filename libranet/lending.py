from __future__ import annotations

import logging
from datetime import datetime, timedelta
from typing import Callable, List, Optional

from libranet.config import settings
from libranet.duration import BorrowDuration
from libranet.exceptions import (
    BorrowLimitExceededError,
    InvalidInputError,
    ItemNotAvailableError,
    NoActiveBorrowError,
    NotAMagazineError,
    NotFoundError,
    ReturnMismatchError,
)
from libranet.items import Audiobook, AvailabilityStatus, Book, EMagazine, Item
from libranet.money import Money
from libranet.records import BorrowRecord, Fine, User
from libranet.repositories import BorrowRecordRepository, FineRepository, ItemRepository, UserRepository
from libranet.utils.validators import IdValidator, TextValidator

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]


class LendingService:
    """Borrow, return, archive and search workflows over the repositories.

    Every workflow validates up front and only then mutates, so a raised
    error leaves all entities as they were.  Item status changes go through
    the item store's atomic helpers; the service never holds two store locks.
    """

    def __init__(self, items: Optional[ItemRepository] = None, users: Optional[UserRepository] = None,
                 records: Optional[BorrowRecordRepository] = None, fines: Optional[FineRepository] = None,
                 daily_fine_rate: Optional[Money] = None, clock: Optional[Clock] = None,
                 enforce_borrow_limit: Optional[bool] = None) -> None:
        self.items = items if items is not None else ItemRepository()
        self.users = users if users is not None else UserRepository()
        self.records = records if records is not None else BorrowRecordRepository()
        self.fines = fines if fines is not None else FineRepository()
        self.daily_fine_rate = daily_fine_rate if daily_fine_rate is not None else Money.from_major(settings.daily_fine_rate)
        self.clock: Clock = clock or datetime.now
        self.enforce_borrow_limit = (settings.enforce_borrow_limit if enforce_borrow_limit is None
                                     else enforce_borrow_limit)

    # ------------------------- Lookups ------------------------- #
    def get_user(self, user_id: int) -> User:
        user = self.users.find_by_id(user_id)
        if user is None:
            raise NotFoundError(f"User {user_id} not found")
        return user

    def get_item(self, item_id: int) -> Item:
        item = self.items.find_by_id(item_id)
        if item is None:
            raise NotFoundError(f"Item {item_id} not found")
        return item

    # ------------------------- Catalogue and users ------------------------- #
    def add_item(self, item: Item) -> int:
        """Register a constructed item. Ids are caller-assigned and must be unused."""
        if not self.items.save_new(item, item.id):
            raise InvalidInputError(f"Item id {item.id} already exists")
        logger.info("Added %s %s: %s", item.type_name, item.id, item.title)
        return item.id

    def add_book(self, item_id: int, title: str, authors: Optional[List[str]], page_count: int) -> int:
        return self.add_item(Book(item_id, title, authors, page_count=page_count))

    def add_audiobook(self, item_id: int, title: str, authors: Optional[List[str]],
                      playback_duration: timedelta, narrator: str = "") -> int:
        return self.add_item(Audiobook(item_id, title, authors, playback_duration=playback_duration,
                                       narrator=narrator))

    def add_magazine(self, item_id: int, title: str, authors: Optional[List[str]], issue_number: int,
                     issue_date: Optional[datetime] = None) -> int:
        return self.add_item(EMagazine(item_id, title, authors, issue_number=issue_number,
                                       issue_date=issue_date or self.clock()))

    def add_user(self, name: str, borrow_limit: Optional[int] = None, user_id: Optional[int] = None) -> int:
        name = TextValidator.clean_name(name)
        if borrow_limit is None:
            borrow_limit = settings.default_borrow_limit
        IdValidator.require_positive(borrow_limit, "Borrow limit")
        if user_id is None:
            user = self.users.add(name, borrow_limit)
        else:
            IdValidator.require_positive(user_id, "User id")
            user = User(id=user_id, name=name, borrow_limit=borrow_limit)
            if not self.users.save_new(user, user_id):
                raise InvalidInputError(f"User id {user_id} already exists")
        logger.info("Added user %s: %s (limit %s)", user.id, user.name, user.borrow_limit)
        return user.id

    # ------------------------- Workflows ------------------------- #
    def borrow_item(self, user_id: int, item_id: int, duration_text: str) -> BorrowRecord:
        user = self.get_user(user_id)
        item = self.get_item(item_id)
        if item.status is not AvailabilityStatus.AVAILABLE:
            raise ItemNotAvailableError(f"Item {item_id} is not available for borrowing")
        if self.enforce_borrow_limit and self.records.count_active_by_user_id(user_id) >= user.borrow_limit:
            raise BorrowLimitExceededError(f"User {user_id} has reached the borrow limit of {user.borrow_limit}")

        duration = BorrowDuration.parse(duration_text)
        now = self.clock()
        due = duration.compute_due_at(now)
        if due <= now:
            raise InvalidInputError("Computed due date must be in the future")

        # Another caller may have taken the item since the check above.
        if not self.items.compare_and_set_status(item_id, AvailabilityStatus.AVAILABLE, AvailabilityStatus.BORROWED):
            raise ItemNotAvailableError(f"Item {item_id} is not available for borrowing")
        record = self.records.save(BorrowRecord(item_id=item_id, user_id=user_id, borrow_at=now, due_at=due))
        logger.info("Borrowed item %s by user %s, due %s", item_id, user_id, due.isoformat())
        return record

    def return_item(self, user_id: int, item_id: int) -> Optional[Fine]:
        """Close the active loan; returns the fine applied, if any."""
        self.get_user(user_id)
        self.get_item(item_id)

        record = self.records.find_active_by_item_id(item_id)
        if record is None:
            raise NoActiveBorrowError(f"No active borrow record for item {item_id}")
        if record.user_id != user_id:
            raise ReturnMismatchError(f"Item {item_id} was not borrowed by user {user_id}")

        now = self.clock()
        overdue_days = record.overdue_days(now)
        if not self.records.close(record.id, now):
            raise NoActiveBorrowError(f"No active borrow record for item {item_id}")

        fine = None
        if overdue_days > 0:
            fine = self.fines.add_fine(item_id, user_id, self.daily_fine_rate * overdue_days,
                                       f"Overdue by {overdue_days} days", applied_at=now)
            logger.info("Applied fine %s for user %s on item %s", fine.amount, user_id, item_id)
        else:
            logger.info("Item %s returned on time by user %s", item_id, user_id)

        self.items.release(item_id)
        return fine

    def search_by_type(self, type_name: str) -> List[Item]:
        return sorted(self.items.find_by_type(type_name), key=lambda item: item.id)

    def archive_magazine(self, item_id: int) -> EMagazine:
        item = self.get_item(item_id)
        if not isinstance(item, EMagazine):
            raise NotAMagazineError(f"Item {item_id} is not an EMagazine")
        self.items.archive_magazine(item)
        logger.info("Archived magazine item %s", item_id)
        return item

    # ------------------------- Accounts ------------------------- #
    def borrow_history(self, user_id: int) -> List[BorrowRecord]:
        self.get_user(user_id)
        return self.records.find_by_user_id(user_id)

    def active_borrows(self, user_id: int) -> List[BorrowRecord]:
        return [r for r in self.borrow_history(user_id) if r.is_active]

    def overdue_records(self) -> List[BorrowRecord]:
        now = self.clock()
        return sorted((r for r in self.records.all() if r.is_active and r.is_overdue(now)), key=lambda r: r.id)

    def fines_for_user(self, user_id: int) -> List[Fine]:
        self.get_user(user_id)
        return self.fines.find_by_user_id(user_id)

    def total_fines_for_user(self, user_id: int) -> Money:
        return sum((fine.amount for fine in self.fines_for_user(user_id)), Money(0))

    # ------------------------- Demo data ------------------------- #
    def seed_demo_catalog(self) -> None:
        """Load the small starter catalogue used by the interactive menu."""
        self.add_book(101, "Design Patterns", ["Gamma", "Helm", "Johnson", "Vlissides"], page_count=395)
        self.add_audiobook(102, "Clean Code (Audio)", ["Robert C. Martin"], timedelta(hours=9), narrator="Narrator A")
        self.add_magazine(103, "Tech Monthly", ["Editorial Team"], issue_number=15)
        self.add_user("Somen Mishra", borrow_limit=5, user_id=201)
