import logging
from datetime import date, timedelta
from typing import Callable, Dict, List, Optional

from book import Book
from database import LibraryDatabase
from member import Member
from results import OperationResult, ResultCode

logger = logging.getLogger(__name__)

MAX_BORROW_DAYS = 14
MAX_BOOKS_PER_MEMBER = 5


class Library:
    """Manages the book catalog, the member registry and their persistence.

    Every query hands out copies of the stored entities, so callers cannot
    change loan state behind the library's back. Mutations return an
    :class:`OperationResult` instead of raising.
    """

    def __init__(self, database: Optional[LibraryDatabase] = None,
                 today: Callable[[], date] = date.today) -> None:
        self.database = database or LibraryDatabase()
        self._today = today
        self._books: Dict[str, Book]
        self._members: Dict[str, Member]
        self._books, self._members = self.database.load()

    # ------------------------- Books ------------------------- #
    def add_book(self, isbn: str, title: str, author: str, genre: str) -> OperationResult:
        if isbn in self._books:
            return self._fail(ResultCode.ALREADY_EXISTS, f"Book with ISBN {isbn} already exists.")

        self._books[isbn] = Book(isbn, title, author, genre)
        logger.info(f"Added book {isbn}")
        return self._commit(f"Book {isbn} added.")

    def remove_book(self, isbn: str) -> OperationResult:
        book = self._books.get(isbn)
        if book is None:
            return self._fail(ResultCode.BOOK_NOT_FOUND, f"Book with ISBN {isbn} not found.")
        if not book.available:
            return self._fail(ResultCode.BOOK_IN_USE, f"Cannot remove book {isbn}: it is currently borrowed.")

        del self._books[isbn]
        logger.info(f"Removed book {isbn}")
        return self._commit(f"Book {isbn} removed.")

    def list_books(self) -> List[Book]:
        return [b.copy() for b in self._books.values()]

    def find_book(self, isbn: str) -> Optional[Book]:
        book = self._books.get(isbn)
        return book.copy() if book else None

    def search_books(self, query: str) -> List[Book]:
        """Case-insensitive substring search over title, author, genre and ISBN.

        A blank query matches the whole catalog.
        """
        if query is None or not query.strip():
            return self.list_books()

        needle = query.lower()
        return [
            b.copy() for b in self._books.values()
            if needle in b.title.lower()
            or needle in b.author.lower()
            or needle in b.genre.lower()
            or needle in b.isbn.lower()
        ]

    # ------------------------- Members ------------------------- #
    def add_member(self, member_id: str, name: str, email: str, phone: str) -> OperationResult:
        if member_id in self._members:
            return self._fail(ResultCode.ALREADY_EXISTS, f"Member with ID {member_id} already exists.")

        self._members[member_id] = Member(member_id, name, email, phone, membership_date=self._today())
        logger.info(f"Added member {member_id}")
        return self._commit(f"Member {member_id} added.")

    def remove_member(self, member_id: str) -> OperationResult:
        member = self._members.get(member_id)
        if member is None:
            return self._fail(ResultCode.MEMBER_NOT_FOUND, f"Member with ID {member_id} not found.")
        if member.borrowed_books:
            return self._fail(ResultCode.MEMBER_HAS_LOANS,
                              f"Cannot remove member {member_id}: they have borrowed books.")

        del self._members[member_id]
        logger.info(f"Removed member {member_id}")
        return self._commit(f"Member {member_id} removed.")

    def update_member(self, member_id: str, *, name: Optional[str] = None, email: Optional[str] = None,
                      phone: Optional[str] = None) -> OperationResult:
        """Update contact details; ``None`` or blank values leave a field unchanged."""
        member = self._members.get(member_id)
        if member is None:
            return self._fail(ResultCode.MEMBER_NOT_FOUND, f"Member with ID {member_id} not found.")

        if name is not None and name.strip():
            member.name = name
        if email is not None and email.strip():
            member.email = email
        if phone is not None and phone.strip():
            member.phone = phone
        return self._commit(f"Member {member_id} updated.")

    def list_members(self) -> List[Member]:
        return [m.copy() for m in self._members.values()]

    def find_member(self, member_id: str) -> Optional[Member]:
        member = self._members.get(member_id)
        return member.copy() if member else None

    # ------------------------- Loans ------------------------- #
    def borrow_book(self, isbn: str, member_id: str) -> OperationResult:
        book = self._books.get(isbn)
        if book is None:
            return self._fail(ResultCode.BOOK_NOT_FOUND, f"Book with ISBN {isbn} not found.")
        member = self._members.get(member_id)
        if member is None:
            return self._fail(ResultCode.MEMBER_NOT_FOUND, f"Member with ID {member_id} not found.")
        if not book.available:
            return self._fail(ResultCode.ALREADY_BORROWED, f"Book {isbn} is already borrowed.")
        if len(member.borrowed_books) >= MAX_BOOKS_PER_MEMBER:
            return self._fail(ResultCode.LIMIT_REACHED,
                              f"Member {member_id} has reached the limit of {MAX_BOOKS_PER_MEMBER} books.")

        today = self._today()
        due = today + timedelta(days=MAX_BORROW_DAYS)
        book.mark_borrowed(member_id, today, due)
        member.borrow_book(isbn)
        logger.info(f"Book {isbn} borrowed by {member_id}, due {due.isoformat()}")
        return self._commit(f"Book borrowed successfully! Due date: {due.strftime('%d-%m-%Y')}", due_date=due)

    def return_book(self, isbn: str) -> OperationResult:
        book = self._books.get(isbn)
        if book is None:
            return self._fail(ResultCode.BOOK_NOT_FOUND, f"Book with ISBN {isbn} not found.")
        if book.available:
            return self._fail(ResultCode.NOT_BORROWED, f"Book {isbn} is not currently borrowed.")

        late = book.days_overdue(self._today())
        holder_id = book.borrowed_by
        book.mark_returned()

        member = self._members.get(holder_id)
        if member is not None:
            member.return_book(isbn)
        else:
            logger.warning(f"Book {isbn} was held by unknown member {holder_id}; nothing to update")

        message = "Book returned successfully!"
        if late:
            message += f" (Was overdue by {late} days)"
        logger.info(f"Book {isbn} returned" + (f", {late} days overdue" if late else ""))
        return self._commit(message, overdue_days=late)

    def list_borrowed(self) -> List[Book]:
        return [b.copy() for b in self._books.values() if not b.available]

    def list_overdue(self) -> List[Book]:
        today = self._today()
        return [b.copy() for b in self._books.values() if b.is_overdue(today)]

    def borrower_of(self, isbn: str) -> Optional[Member]:
        """The member holding ``isbn``, or None if it is available or the holder is unknown."""
        book = self._books.get(isbn)
        if book is None or book.available:
            return None
        return self.find_member(book.borrowed_by)

    def overdue_days(self, isbn: str) -> int:
        book = self._books.get(isbn)
        return book.days_overdue(self._today()) if book else 0

    # ------------------------- Reporting ------------------------- #
    def library_report(self) -> Dict[str, int]:
        today = self._today()
        total = len(self._books)
        available = sum(1 for b in self._books.values() if b.available)
        return {
            "total_books": total,
            "total_members": len(self._members),
            "available_books": available,
            "borrowed_books": total - available,
            "overdue_books": sum(1 for b in self._books.values() if b.is_overdue(today)),
        }

    # ------------------------- Utilities ------------------------- #
    def _commit(self, message: str, **payload) -> OperationResult:
        persisted = self.database.save(self._books, self._members)
        if not persisted:
            logger.error("Change applied in memory but could not be saved")
        return OperationResult(ResultCode.SUCCESS, message, persisted=persisted, **payload)

    @staticmethod
    def _fail(code: ResultCode, message: str) -> OperationResult:
        logger.debug(f"{code.value}: {message}")
        return OperationResult(code, message)
