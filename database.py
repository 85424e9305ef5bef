import json
import logging
import os
import sqlite3
from typing import Dict, Optional, Tuple

from book import Book
from config import settings
from member import Member

logger = logging.getLogger(__name__)

# Bumped whenever the table layout changes; stored in PRAGMA user_version.
SCHEMA_VERSION = 1

BOOK_COLUMNS = ("isbn", "title", "author", "genre", "available", "borrowed_by", "borrow_date", "due_date")
MEMBER_COLUMNS = ("member_id", "name", "email", "phone", "membership_date", "borrowed_books")


class StoreFormatError(Exception):
    """Raised when a store was written by a newer schema version."""


def get_db_connection(path: str) -> sqlite3.Connection:
    """Opens a connection to one of the SQLite store files."""
    conn = sqlite3.connect(path)
    conn.row_factory = sqlite3.Row
    return conn


def create_tables(conn: sqlite3.Connection, kind: str) -> None:
    """Creates the table for a store if missing and stamps the schema version."""
    if kind == "books":
        conn.execute("""
            CREATE TABLE IF NOT EXISTS books (
                isbn TEXT PRIMARY KEY,
                title TEXT NOT NULL,
                author TEXT NOT NULL,
                genre TEXT NOT NULL,
                available INTEGER NOT NULL DEFAULT 1,
                borrowed_by TEXT,
                borrow_date TEXT,
                due_date TEXT
            )
        """)
    else:
        conn.execute("""
            CREATE TABLE IF NOT EXISTS members (
                member_id TEXT PRIMARY KEY,
                name TEXT NOT NULL,
                email TEXT NOT NULL,
                phone TEXT NOT NULL,
                membership_date TEXT NOT NULL,
                borrowed_books TEXT NOT NULL DEFAULT '[]'
            )
        """)
    conn.execute(f"PRAGMA user_version = {SCHEMA_VERSION}")
    conn.commit()


def _check_version(conn: sqlite3.Connection) -> None:
    version = conn.execute("PRAGMA user_version").fetchone()[0]
    if version > SCHEMA_VERSION:
        raise StoreFormatError(f"store schema version {version} is newer than supported {SCHEMA_VERSION}")


class LibraryDatabase:
    """Loads and saves the book catalog and member registry.

    Books and members live in two independent SQLite files so that losing or
    corrupting one does not take the other down with it. Loading never raises:
    a missing or unreadable store comes back empty. Saving never raises either;
    failures are logged and reported through the return value.
    """

    def __init__(self, books_file: Optional[str] = None, members_file: Optional[str] = None) -> None:
        self.books_file = books_file or settings.books_path()
        self.members_file = members_file or settings.members_path()

    # ------------------------- Loading ------------------------- #
    def load(self) -> Tuple[Dict[str, Book], Dict[str, Member]]:
        books = self._load_store(self.books_file, "books", self._read_books)
        members = self._load_store(self.members_file, "members", self._read_members)
        return books, members

    def _load_store(self, path: str, kind: str, reader) -> dict:
        if not os.path.exists(path):
            logger.info(f"No existing {kind} data found at {path}. Starting empty.")
            return {}

        try:
            conn = get_db_connection(path)
            try:
                _check_version(conn)
                records = reader(conn)
            finally:
                conn.close()
        except (sqlite3.Error, StoreFormatError, KeyError, ValueError, TypeError) as e:
            logger.warning(f"Could not read {kind} data from {path}: {e}. Starting empty.")
            self._set_aside(path)
            return {}

        logger.info(f"Loaded {len(records)} {kind} from {path}")
        return records

    @staticmethod
    def _read_books(conn: sqlite3.Connection) -> Dict[str, Book]:
        cursor = conn.execute(f"SELECT {', '.join(BOOK_COLUMNS)} FROM books")
        books = {}
        for row in cursor.fetchall():
            book = Book.from_dict(dict(row))
            books[book.isbn] = book
        return books

    @staticmethod
    def _read_members(conn: sqlite3.Connection) -> Dict[str, Member]:
        cursor = conn.execute(f"SELECT {', '.join(MEMBER_COLUMNS)} FROM members")
        members = {}
        for row in cursor.fetchall():
            member = Member.from_dict(dict(row))
            members[member.member_id] = member
        return members

    @staticmethod
    def _set_aside(path: str) -> None:
        """Moves an unreadable store out of the way so the next save can recreate it."""
        target = f"{path}.corrupt"
        try:
            os.replace(path, target)
            logger.warning(f"Moved unreadable store {path} to {target}")
        except OSError as e:
            logger.error(f"Could not move unreadable store {path}: {e}")

    # ------------------------- Saving ------------------------- #
    def save(self, books: Dict[str, Book], members: Dict[str, Member]) -> bool:
        """Writes both stores; returns False if either write failed."""
        books_ok = self._save_store(self.books_file, "books", BOOK_COLUMNS,
                                    [self._book_row(b) for b in books.values()])
        members_ok = self._save_store(self.members_file, "members", MEMBER_COLUMNS,
                                      [self._member_row(m) for m in members.values()])
        return books_ok and members_ok

    def _save_store(self, path: str, kind: str, columns: Tuple[str, ...], rows: list) -> bool:
        placeholders = ", ".join("?" for _ in columns)
        try:
            directory = os.path.dirname(path)
            if directory:
                os.makedirs(directory, exist_ok=True)
            conn = get_db_connection(path)
            try:
                _check_version(conn)
                create_tables(conn, kind)
                # Single transaction: either the whole new snapshot lands or the old one stays.
                with conn:
                    conn.execute(f"DELETE FROM {kind}")
                    conn.executemany(
                        f"INSERT INTO {kind} ({', '.join(columns)}) VALUES ({placeholders})",
                        rows,
                    )
            finally:
                conn.close()
        except (sqlite3.Error, StoreFormatError, OSError) as e:
            logger.error(f"Error saving {kind} data to {path}: {e}")
            return False

        logger.debug(f"Saved {len(rows)} {kind} to {path}")
        return True

    @staticmethod
    def _book_row(book: Book) -> tuple:
        data = book.to_dict()
        data["available"] = 1 if book.available else 0
        return tuple(data[c] for c in BOOK_COLUMNS)

    @staticmethod
    def _member_row(member: Member) -> tuple:
        data = member.to_dict()
        data["borrowed_books"] = json.dumps(data["borrowed_books"])
        return tuple(data[c] for c in MEMBER_COLUMNS)
