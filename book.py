from __future__ import annotations

from datetime import date


def _parse_date(value: date | str | None) -> date | None:
    if value is None or value == "":
        return None
    if isinstance(value, date):
        return value
    return date.fromisoformat(value)


def _format_date(value: date | None) -> str | None:
    return value.isoformat() if value is not None else None


class Book:
    """Represents a single lendable book in the catalog."""

    def __init__(self, isbn: str, title: str, author: str, genre: str, available: bool = True,
                 borrowed_by: str | None = None, borrow_date: date | None = None,
                 due_date: date | None = None) -> None:
        self._isbn = isbn
        self.title = title
        self.author = author
        self.genre = genre
        self.available = available
        self.borrowed_by = borrowed_by
        self.borrow_date = borrow_date
        self.due_date = due_date

    @property
    def isbn(self) -> str:
        return self._isbn

    @property
    def status(self) -> str:
        return "Available" if self.available else f"Borrowed by {self.borrowed_by}"

    def is_overdue(self, today: date) -> bool:
        """True while the book is lent out and ``today`` is strictly past the due date."""
        return not self.available and self.due_date is not None and today > self.due_date

    def days_overdue(self, today: date) -> int:
        if not self.is_overdue(today):
            return 0
        return today.toordinal() - self.due_date.toordinal()

    def mark_borrowed(self, member_id: str, borrow_date: date, due_date: date) -> None:
        self.available = False
        self.borrowed_by = member_id
        self.borrow_date = borrow_date
        self.due_date = due_date

    def mark_returned(self) -> None:
        self.available = True
        self.borrowed_by = None
        self.borrow_date = None
        self.due_date = None

    def copy(self) -> "Book":
        # Skips the loan-field check that from_dict applies to stored rows
        return Book(self.isbn, self.title, self.author, self.genre, self.available,
                    self.borrowed_by, self.borrow_date, self.due_date)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Book):
            return NotImplemented
        return self.to_dict() == other.to_dict()

    def __repr__(self) -> str:
        return f"Book(isbn={self.isbn!r}, title={self.title!r}, available={self.available!r})"

    def __str__(self) -> str:  # pragma: no cover - string formatting trivial
        return (f"ISBN: {self.isbn} | Title: {self.title} | Author: {self.author} | "
                f"Genre: {self.genre} | Status: {self.status}")

    def to_dict(self) -> dict:
        return {
            "isbn": self.isbn,
            "title": self.title,
            "author": self.author,
            "genre": self.genre,
            "available": self.available,
            "borrowed_by": self.borrowed_by,
            "borrow_date": _format_date(self.borrow_date),
            "due_date": _format_date(self.due_date),
        }

    @staticmethod
    def from_dict(data: dict) -> "Book":
        # SQLite stores booleans as 0/1 integers
        available = data.get("available", True)
        if available is None:
            available = True
        book = Book(
            isbn=data["isbn"],
            title=data["title"],
            author=data["author"],
            genre=data["genre"],
            available=bool(available),
            borrowed_by=data.get("borrowed_by"),
            borrow_date=_parse_date(data.get("borrow_date")),
            due_date=_parse_date(data.get("due_date")),
        )
        loan_fields = (book.borrowed_by, book.borrow_date, book.due_date)
        if book.available and any(f is not None for f in loan_fields):
            raise ValueError(f"Book {book.isbn} is available but carries loan fields.")
        if not book.available and any(f is None for f in loan_fields):
            raise ValueError(f"Book {book.isbn} is borrowed but loan fields are incomplete.")
        return book
