import json
from datetime import date, timedelta

import pytest
from typer.testing import CliRunner

from book import Book
from database import LibraryDatabase
from main import app
from member import Member

runner = CliRunner()


@pytest.fixture
def invoke(tmp_path):
    def _invoke(*args):
        return runner.invoke(app, ["--data-dir", str(tmp_path), *args])
    return _invoke


def test_list_no_books(invoke):
    result = invoke("list")
    assert result.exit_code == 0
    assert "No books in the library." in result.stdout


def test_add_and_list_book(invoke):
    result = invoke("add-book", "B1", "Dune", "Frank Herbert", "Science Fiction")
    assert result.exit_code == 0
    assert "Book B1 added." in result.stdout

    result = invoke("list")
    assert "ISBN: B1 | Title: Dune | Author: Frank Herbert | Genre: Science Fiction | Status: Available" \
        in result.stdout


def test_add_duplicate_book(invoke):
    invoke("add-book", "B1", "Dune", "Frank Herbert", "Science Fiction")
    result = invoke("add-book", "B1", "Dune", "Frank Herbert", "Science Fiction")
    assert result.exit_code == 0
    assert "Book with ISBN B1 already exists." in result.stdout


def test_blank_required_field_is_rejected(invoke):
    result = invoke("add-book", "B1", "   ", "Frank Herbert", "Science Fiction")
    assert result.exit_code == 1
    assert "Required field(s) missing: title" in result.stdout

    assert "No books in the library." in invoke("list").stdout


def test_search(invoke):
    invoke("add-book", "B1", "Dune", "Frank Herbert", "Science Fiction")
    invoke("add-book", "B2", "Hamlet", "William Shakespeare", "Drama")

    result = invoke("search", "sci")
    assert "Dune" in result.stdout
    assert "Hamlet" not in result.stdout

    result = invoke("search", "poetry")
    assert "No books found matching your search." in result.stdout


def test_borrow_return_flow(invoke):
    invoke("add-book", "B1", "Dune", "Frank Herbert", "Science Fiction")
    invoke("add-member", "M1", "Ada Lovelace", "ada@example.com", "555-0101")

    result = invoke("borrow", "B1", "M1")
    assert result.exit_code == 0
    assert "Book borrowed successfully! Due date:" in result.stdout

    result = invoke("borrowed")
    assert "Borrowed by: Ada Lovelace" in result.stdout

    result = invoke("remove-member", "M1")
    assert "they have borrowed books" in result.stdout

    result = invoke("return", "B1")
    assert "Book returned successfully!" in result.stdout
    assert "No books are currently borrowed." in invoke("borrowed").stdout
    assert "No overdue books." in invoke("overdue").stdout


def test_borrow_unknown_member(invoke):
    invoke("add-book", "B1", "Dune", "Frank Herbert", "Science Fiction")
    result = invoke("borrow", "B1", "M9")
    assert result.exit_code == 0
    assert "Member with ID M9 not found." in result.stdout


def test_update_member_and_list(invoke):
    invoke("add-member", "M1", "Ada", "ada@example.com", "555")
    result = invoke("update-member", "M1", "--email", "ada@newmail.org")
    assert "Member M1 updated." in result.stdout

    result = invoke("members")
    assert "Email: ada@newmail.org" in result.stdout
    assert "Books Borrowed: 0" in result.stdout


def test_report_plain(invoke):
    invoke("add-book", "B1", "Dune", "Frank Herbert", "Science Fiction")
    invoke("add-member", "M1", "Ada", "ada@example.com", "555")
    invoke("borrow", "B1", "M1")

    result = invoke("report")
    assert result.exit_code == 0
    assert "Total Books: 1" in result.stdout
    assert "Total Members: 1" in result.stdout
    assert "Available Books: 0" in result.stdout
    assert "Borrowed Books: 1" in result.stdout
    assert "Overdue Books: 0" in result.stdout


def test_json_output(tmp_path):
    runner.invoke(app, ["--data-dir", str(tmp_path), "add-book", "B1", "Dune", "Frank Herbert", "Sci-Fi"])

    result = runner.invoke(app, ["--data-dir", str(tmp_path), "-o", "json", "report"])
    assert json.loads(result.stdout)["total_books"] == 1

    result = runner.invoke(app, ["--data-dir", str(tmp_path), "-o", "json", "remove-book", "B9"])
    payload = json.loads(result.stdout)
    assert payload["ok"] is False
    assert payload["code"] == "book_not_found"
    assert payload["kind"] == "not_found"


def test_overdue_return_mentions_days_once(tmp_path):
    today = date.today()
    lent = Book("B1", "Dune", "Frank Herbert", "Science Fiction")
    lent.mark_borrowed("M1", today - timedelta(days=20), today - timedelta(days=6))
    member = Member("M1", "Ada", "ada@example.com", "555", borrowed_books=["B1"])
    LibraryDatabase(str(tmp_path / "books.db"), str(tmp_path / "members.db")).save({"B1": lent}, {"M1": member})

    result = runner.invoke(app, ["--data-dir", str(tmp_path), "return", "B1"])
    assert result.exit_code == 0
    assert "Book returned successfully! (Was overdue by 6 days)" in result.stdout
    assert result.stdout.lower().count("overdue by") == 1


def test_json_empty_lists(tmp_path):
    for command in ("list", "members", "borrowed", "overdue"):
        result = runner.invoke(app, ["--data-dir", str(tmp_path), "-o", "json", command])
        assert result.exit_code == 0
        assert json.loads(result.stdout) == []


def test_rich_output(tmp_path):
    runner.invoke(app, ["--data-dir", str(tmp_path), "add-book", "B1", "Dune", "Frank Herbert", "Sci-Fi"])
    runner.invoke(app, ["--data-dir", str(tmp_path), "add-member", "M1", "Ada", "ada@example.com", "555"])
    runner.invoke(app, ["--data-dir", str(tmp_path), "borrow", "B1", "M1"])

    for command, expected in (("list", "Dune"), ("members", "Ada"), ("borrowed", "Ada"), ("report", "Total Books")):
        result = runner.invoke(app, ["--data-dir", str(tmp_path), "-o", "rich", command])
        assert result.exit_code == 0
        assert expected in result.stdout
