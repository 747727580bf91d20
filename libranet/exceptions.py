"""Typed failures raised by the lending core.

Every exception derives from :class:`LibraryError` and carries an
:class:`ErrorKind` so drivers can branch on the kind without importing each
class.  ``NotFoundError`` and ``InvalidInputError`` also subclass the builtin
``LookupError`` / ``ValueError`` so existing ``except ValueError`` handlers
keep working.
"""

from __future__ import annotations

from enum import Enum


class ErrorKind(str, Enum):
    NOT_FOUND = "not_found"
    INVALID_INPUT = "invalid_input"
    ITEM_NOT_AVAILABLE = "item_not_available"
    BORROW_LIMIT_EXCEEDED = "borrow_limit_exceeded"
    RETURN_MISMATCH = "return_mismatch"
    NOT_A_MAGAZINE = "not_a_magazine"
    ALREADY_ARCHIVED = "already_archived"


class LibraryError(Exception):
    """Base class for every domain violation."""

    kind: ErrorKind

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class NotFoundError(LibraryError, LookupError):
    kind = ErrorKind.NOT_FOUND


class InvalidInputError(LibraryError, ValueError):
    kind = ErrorKind.INVALID_INPUT


class BorrowError(LibraryError):
    kind = ErrorKind.ITEM_NOT_AVAILABLE


class ItemNotAvailableError(BorrowError):
    kind = ErrorKind.ITEM_NOT_AVAILABLE


class BorrowLimitExceededError(BorrowError):
    kind = ErrorKind.BORROW_LIMIT_EXCEEDED


class ReturnError(LibraryError):
    kind = ErrorKind.RETURN_MISMATCH


class NoActiveBorrowError(ReturnError):
    pass


class ReturnMismatchError(ReturnError):
    pass


class ArchiveError(LibraryError):
    kind = ErrorKind.NOT_A_MAGAZINE


class NotAMagazineError(ArchiveError):
    kind = ErrorKind.NOT_A_MAGAZINE


class AlreadyArchivedError(ArchiveError):
    kind = ErrorKind.ALREADY_ARCHIVED
