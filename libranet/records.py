"""Users, borrow records and fines."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timedelta
from enum import Enum
from typing import Optional

from libranet.money import Money


class BorrowStatus(str, Enum):
    ACTIVE = "ACTIVE"
    RETURNED = "RETURNED"
    OVERDUE = "OVERDUE"  # derived label only, never stored


@dataclass(frozen=True)
class User:
    id: int
    name: str
    borrow_limit: int = 5

    def to_dict(self) -> dict:
        return {"id": self.id, "name": self.name, "borrow_limit": self.borrow_limit}


@dataclass
class BorrowRecord:
    """One loan of one item to one user.

    ``id`` stays 0 until the record repository assigns one on first save.
    """

    item_id: int
    user_id: int
    borrow_at: datetime
    due_at: datetime
    status: BorrowStatus = BorrowStatus.ACTIVE
    id: int = 0
    returned_at: Optional[datetime] = None

    @property
    def is_active(self) -> bool:
        return self.status is BorrowStatus.ACTIVE

    def is_overdue(self, now: Optional[datetime] = None) -> bool:
        now = now or datetime.now()
        return now > self.due_at

    def overdue_days(self, now: Optional[datetime] = None) -> int:
        """Whole days past due, floored, but at least 1 once overdue at all."""
        now = now or datetime.now()
        if not self.is_overdue(now):
            return 0
        return max(1, (now - self.due_at) // timedelta(days=1))

    def effective_status(self, now: Optional[datetime] = None) -> BorrowStatus:
        if self.is_active and self.is_overdue(now):
            return BorrowStatus.OVERDUE
        return self.status

    def mark_returned(self, when: Optional[datetime] = None) -> None:
        self.status = BorrowStatus.RETURNED
        self.returned_at = when or datetime.now()

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "item_id": self.item_id,
            "user_id": self.user_id,
            "borrow_at": self.borrow_at.isoformat(),
            "due_at": self.due_at.isoformat(),
            "status": self.status.value,
            "returned_at": self.returned_at.isoformat() if self.returned_at else None,
        }


@dataclass(frozen=True)
class Fine:
    id: int
    item_id: int
    user_id: int
    amount: Money
    reason: str
    applied_at: datetime = field(default_factory=datetime.now)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "item_id": self.item_id,
            "user_id": self.user_id,
            "amount": str(self.amount),
            "reason": self.reason,
            "applied_at": self.applied_at.isoformat(),
        }
