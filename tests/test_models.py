from datetime import date

import pytest

from book import Book
from member import Member


def test_new_book_is_available():
    book = Book("B1", "Dune", "Frank Herbert", "Science Fiction")
    assert book.available
    assert book.status == "Available"
    assert book.is_overdue(date(2030, 1, 1)) is False


def test_borrow_and_return_cycle():
    book = Book("B1", "Dune", "Frank Herbert", "Science Fiction")
    book.mark_borrowed("M1", date(2024, 1, 1), date(2024, 1, 15))

    assert book.status == "Borrowed by M1"
    assert book.is_overdue(date(2024, 1, 15)) is False
    assert book.days_overdue(date(2024, 1, 21)) == 6

    book.mark_returned()
    assert book.available
    assert (book.borrowed_by, book.borrow_date, book.due_date) == (None, None, None)


def test_isbn_is_read_only():
    book = Book("B1", "Dune", "Frank Herbert", "Science Fiction")
    with pytest.raises(AttributeError):
        book.isbn = "B2"


def test_book_from_dict_handles_sqlite_values():
    book = Book.from_dict({
        "isbn": "B1", "title": "Dune", "author": "Frank Herbert", "genre": "Science Fiction",
        "available": 0, "borrowed_by": "M1", "borrow_date": "2024-01-01", "due_date": "2024-01-15",
    })
    assert book.available is False
    assert book.due_date == date(2024, 1, 15)


def test_book_from_dict_rejects_half_loans():
    with pytest.raises(ValueError):
        Book.from_dict({
            "isbn": "B1", "title": "Dune", "author": "Frank Herbert", "genre": "Science Fiction",
            "available": 1, "borrowed_by": "M1",
        })


def test_member_borrowed_set_suppresses_duplicates():
    member = Member("M1", "Ada", "ada@example.com", "555", membership_date=date(2024, 1, 1))
    member.borrow_book("B1")
    member.borrow_book("B1")
    assert member.borrowed_count == 1

    member.return_book("B1")
    member.return_book("B1")
    assert member.borrowed_books == set()


def test_member_from_dict_parses_json_list():
    member = Member.from_dict({
        "member_id": "M1", "name": "Ada", "email": "ada@example.com", "phone": "555",
        "membership_date": "2024-01-01", "borrowed_books": '["B2", "B1"]',
    })
    assert member.borrowed_books == {"B1", "B2"}
    assert member.membership_date == date(2024, 1, 1)
    assert member.to_dict()["borrowed_books"] == ["B1", "B2"]


def test_copy_does_not_validate_loan_fields():
    book = Book("B1", "Dune", "Frank Herbert", "Science Fiction", available=False)
    clone = book.copy()
    assert clone is not book
    assert clone.available is False
    assert clone.borrowed_by is None
