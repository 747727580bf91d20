from __future__ import annotations

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from typing import Union

from libranet.config import settings

MINOR_UNITS_PER_MAJOR = 100


@dataclass(frozen=True, order=True)
class Money:
    """Exact amount held as an integer count of minor units (paise, cents)."""

    minor: int = 0

    def __post_init__(self) -> None:
        if isinstance(self.minor, bool) or not isinstance(self.minor, int):
            raise TypeError(f"Money needs an integer minor-unit amount, got {self.minor!r}")

    @classmethod
    def from_major(cls, amount: Union[int, float, str, Decimal]) -> "Money":
        """Build from a major-unit amount, rounding half away from zero."""
        value = Decimal(str(amount)) * MINOR_UNITS_PER_MAJOR
        return cls(int(value.quantize(Decimal("1"), rounding=ROUND_HALF_UP)))

    def to_major(self) -> float:
        return self.minor / MINOR_UNITS_PER_MAJOR

    def __add__(self, other: "Money") -> "Money":
        if not isinstance(other, Money):
            return NotImplemented
        return Money(self.minor + other.minor)

    def __sub__(self, other: "Money") -> "Money":
        if not isinstance(other, Money):
            return NotImplemented
        return Money(self.minor - other.minor)

    def __mul__(self, count: int) -> "Money":
        if isinstance(count, bool) or not isinstance(count, int):
            return NotImplemented
        return Money(self.minor * count)

    __rmul__ = __mul__

    def format(self, currency: str | None = None) -> str:
        sign = "-" if self.minor < 0 else ""
        major, minor = divmod(abs(self.minor), MINOR_UNITS_PER_MAJOR)
        return f"{sign}{major}.{minor:02d} {currency or settings.currency}"

    def __str__(self) -> str:
        return self.format()
