"""
Thread-safe in-memory stores for items, users, borrow records and fines.

Each store owns its canonical instances and serialises every operation with
its own re-entrant lock, so no caller can observe a half-applied update.
Nothing spans two stores; multi-store workflows live in the lending service.
"""

import logging
import threading
from datetime import datetime
from typing import Callable, Dict, Generic, List, Optional, TypeVar

from libranet.items import AvailabilityStatus, EMagazine, Item
from libranet.money import Money
from libranet.records import BorrowRecord, BorrowStatus, Fine, User

logger = logging.getLogger(__name__)

T = TypeVar("T")


class InMemoryRepository(Generic[T]):
    """Keyed store guarded by a single lock."""

    def __init__(self) -> None:
        self._storage: Dict[int, T] = {}
        self._lock = threading.RLock()

    def find_by_id(self, key: int) -> Optional[T]:
        with self._lock:
            return self._storage.get(key)

    def save(self, obj: T, key: int) -> T:
        with self._lock:
            self._storage[key] = obj
        return obj

    def save_new(self, obj: T, key: int) -> bool:
        """Insert only if ``key`` is unused; False leaves the stored object untouched."""
        with self._lock:
            if key in self._storage:
                return False
            self._storage[key] = obj
            return True

    def all(self) -> List[T]:
        """Snapshot of every stored object, in no particular order."""
        with self._lock:
            return list(self._storage.values())

    def remove(self, key: int) -> bool:
        with self._lock:
            return self._storage.pop(key, None) is not None

    def _filter(self, predicate: Callable[[T], bool]) -> List[T]:
        with self._lock:
            return [obj for obj in self._storage.values() if predicate(obj)]

    def __len__(self) -> int:
        with self._lock:
            return len(self._storage)

    def __contains__(self, key: object) -> bool:
        with self._lock:
            return key in self._storage


class ItemRepository(InMemoryRepository[Item]):

    def find_by_type(self, type_name: str) -> List[Item]:
        wanted = (type_name or "").strip().lower()
        return self._filter(lambda item: item.type_name.lower() == wanted)

    def compare_and_set_status(self, item_id: int, expected: AvailabilityStatus,
                               new: AvailabilityStatus) -> bool:
        """Set ``new`` only if the item currently has ``expected``; atomic per store."""
        with self._lock:
            item = self._storage.get(item_id)
            if item is None or item.status is not expected:
                return False
            item.status = new
            return True

    def release(self, item_id: int) -> Optional[Item]:
        """Put a returned item back on the shelf; archived magazines stay in maintenance."""
        with self._lock:
            item = self._storage.get(item_id)
            if item is None:
                return None
            if isinstance(item, EMagazine) and item.archived:
                item.status = AvailabilityStatus.MAINTENANCE
            else:
                item.status = AvailabilityStatus.AVAILABLE
            return item

    def archive_magazine(self, magazine: EMagazine) -> EMagazine:
        with self._lock:
            magazine.archive_issue()
        return magazine


class UserRepository(InMemoryRepository[User]):

    def add(self, name: str, borrow_limit: int) -> User:
        """Create a user under the next free id."""
        with self._lock:
            user_id = max(self._storage, default=0) + 1
            user = User(id=user_id, name=name, borrow_limit=borrow_limit)
            self._storage[user_id] = user
            return user


class BorrowRecordRepository(InMemoryRepository[BorrowRecord]):

    def __init__(self) -> None:
        super().__init__()
        self._next_id = 1

    def save(self, record: BorrowRecord, key: Optional[int] = None) -> BorrowRecord:
        """Upsert; a record without an id gets the next one from the sequence."""
        with self._lock:
            if not record.id:
                record.id = self._next_id
                self._next_id += 1
            elif record.id >= self._next_id:
                self._next_id = record.id + 1
            self._storage[record.id] = record
            return record

    def find_active_by_item_id(self, item_id: int) -> Optional[BorrowRecord]:
        with self._lock:
            for record in self._storage.values():
                if record.item_id == item_id and record.status is BorrowStatus.ACTIVE:
                    return record
            return None

    def find_by_user_id(self, user_id: int) -> List[BorrowRecord]:
        return sorted(self._filter(lambda r: r.user_id == user_id), key=lambda r: r.id)

    def count_active_by_user_id(self, user_id: int) -> int:
        return len(self._filter(lambda r: r.user_id == user_id and r.status is BorrowStatus.ACTIVE))

    def close(self, record_id: int, when: Optional[datetime] = None) -> bool:
        """Flip ACTIVE to RETURNED; False if the record is missing or already closed."""
        with self._lock:
            record = self._storage.get(record_id)
            if record is None or record.status is not BorrowStatus.ACTIVE:
                return False
            record.mark_returned(when)
            return True


class FineRepository(InMemoryRepository[Fine]):

    def __init__(self) -> None:
        super().__init__()
        self._next_id = 1

    def add_fine(self, item_id: int, user_id: int, amount: Money, reason: str,
                 applied_at: Optional[datetime] = None) -> Fine:
        with self._lock:
            fine = Fine(id=self._next_id, item_id=item_id, user_id=user_id, amount=amount,
                        reason=reason, applied_at=applied_at or datetime.now())
            self._storage[fine.id] = fine
            self._next_id += 1
            return fine

    def find_by_user_id(self, user_id: int) -> List[Fine]:
        return sorted(self._filter(lambda f: f.user_id == user_id), key=lambda f: f.id)
