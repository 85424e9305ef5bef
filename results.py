from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import Optional


class ErrorKind(str, Enum):
    NOT_FOUND = "not_found"
    CONFLICT = "conflict"
    INVALID_STATE = "invalid_state"
    LIMIT_EXCEEDED = "limit_exceeded"


class ResultCode(str, Enum):
    SUCCESS = "success"
    BOOK_NOT_FOUND = "book_not_found"
    MEMBER_NOT_FOUND = "member_not_found"
    ALREADY_EXISTS = "already_exists"
    BOOK_IN_USE = "book_in_use"
    MEMBER_HAS_LOANS = "member_has_loans"
    ALREADY_BORROWED = "already_borrowed"
    NOT_BORROWED = "not_borrowed"
    LIMIT_REACHED = "limit_reached"

    @property
    def kind(self) -> Optional[ErrorKind]:
        return _KINDS.get(self)


_KINDS = {
    ResultCode.BOOK_NOT_FOUND: ErrorKind.NOT_FOUND,
    ResultCode.MEMBER_NOT_FOUND: ErrorKind.NOT_FOUND,
    ResultCode.ALREADY_EXISTS: ErrorKind.CONFLICT,
    ResultCode.BOOK_IN_USE: ErrorKind.INVALID_STATE,
    ResultCode.MEMBER_HAS_LOANS: ErrorKind.INVALID_STATE,
    ResultCode.ALREADY_BORROWED: ErrorKind.INVALID_STATE,
    ResultCode.NOT_BORROWED: ErrorKind.INVALID_STATE,
    ResultCode.LIMIT_REACHED: ErrorKind.LIMIT_EXCEEDED,
}


@dataclass(frozen=True)
class OperationResult:
    """Outcome of a mutating Library operation.

    Truthy on success so callers can keep writing ``if lib.remove_book(isbn):``.
    ``persisted`` is False when the in-memory change went through but writing
    it to storage failed.
    """

    code: ResultCode
    message: str
    due_date: Optional[date] = None
    overdue_days: int = 0
    persisted: bool = True

    @property
    def ok(self) -> bool:
        return self.code is ResultCode.SUCCESS

    @property
    def kind(self) -> Optional[ErrorKind]:
        return self.code.kind

    def __bool__(self) -> bool:
        return self.ok

    def to_dict(self) -> dict:
        return {
            "ok": self.ok,
            "code": self.code.value,
            "kind": self.kind.value if self.kind else None,
            "message": self.message,
            "due_date": self.due_date.isoformat() if self.due_date else None,
            "overdue_days": self.overdue_days,
            "persisted": self.persisted,
        }
