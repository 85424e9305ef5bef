from __future__ import annotations

import json
from datetime import date
from typing import Iterable


class Member:
    """A registered library member and the ISBNs they currently hold."""

    def __init__(self, member_id: str, name: str, email: str, phone: str,
                 membership_date: date | None = None, borrowed_books: Iterable[str] | None = None) -> None:
        self._member_id = member_id
        self.name = name
        self.email = email
        self.phone = phone
        self._membership_date = membership_date or date.today()
        self.borrowed_books: set[str] = set(borrowed_books or ())

    @property
    def member_id(self) -> str:
        return self._member_id

    @property
    def membership_date(self) -> date:
        return self._membership_date

    @property
    def borrowed_count(self) -> int:
        return len(self.borrowed_books)

    def borrow_book(self, isbn: str) -> None:
        self.borrowed_books.add(isbn)

    def return_book(self, isbn: str) -> None:
        self.borrowed_books.discard(isbn)

    def copy(self) -> "Member":
        return Member(self.member_id, self.name, self.email, self.phone,
                      membership_date=self.membership_date, borrowed_books=self.borrowed_books)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Member):
            return NotImplemented
        return self.to_dict() == other.to_dict()

    def __repr__(self) -> str:
        return f"Member(member_id={self.member_id!r}, name={self.name!r})"

    def __str__(self) -> str:  # pragma: no cover - string formatting trivial
        return (f"ID: {self.member_id} | Name: {self.name} | Email: {self.email} | Phone: {self.phone} | "
                f"Books Borrowed: {self.borrowed_count} | "
                f"Member Since: {self.membership_date.strftime('%d-%m-%Y')}")

    def to_dict(self) -> dict:
        return {
            "member_id": self.member_id,
            "name": self.name,
            "email": self.email,
            "phone": self.phone,
            "membership_date": self.membership_date.isoformat(),
            "borrowed_books": sorted(self.borrowed_books),
        }

    @staticmethod
    def from_dict(data: dict) -> "Member":
        # borrowed_books comes back from SQLite as a JSON array string
        held = data.get("borrowed_books")
        if isinstance(held, str):
            held = json.loads(held) if held else []

        membership = data["membership_date"]
        if isinstance(membership, str):
            membership = date.fromisoformat(membership)

        return Member(
            member_id=data["member_id"],
            name=data["name"],
            email=data["email"],
            phone=data["phone"],
            membership_date=membership,
            borrowed_books=held,
        )
