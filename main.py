import logging
from typing import Optional

import typer

from config import settings
from database import LibraryDatabase
from library import Library
from utils.ui_helpers import (
    print_book_list,
    print_member_list,
    print_report,
    print_result,
    set_output_mode,
)
from utils.validators import InputValidator


app = typer.Typer(help=f"{settings.app_name} - books, members and loans.", no_args_is_help=True)


def _library(ctx: typer.Context) -> Library:
    return ctx.obj


def _require(**fields: Optional[str]) -> dict:
    """Trim the inputs and stop with exit code 1 if any is blank."""
    try:
        return InputValidator.require(**fields)
    except ValueError as e:
        print(f"Error: {e}")
        raise typer.Exit(code=1)


@app.callback()
def _global_options(
    ctx: typer.Context,
    output: Optional[str] = typer.Option(
        None,
        "--output",
        "-o",
        help="Output format: plain | json | rich (default: plain)",
    ),
    data_dir: Optional[str] = typer.Option(
        None,
        "--data-dir",
        help="Directory holding the book and member stores.",
    ),
):
    """Global options for the CLI (output mode, data location)."""
    logging.basicConfig(level=logging.DEBUG if settings.debug else settings.log_level)
    set_output_mode(output or settings.cli_output)
    database = LibraryDatabase(settings.books_path(data_dir), settings.members_path(data_dir))
    ctx.obj = Library(database)


# ------------------------- Books ------------------------- #
@app.command("add-book")
def cli_add_book(ctx: typer.Context, isbn: str, title: str, author: str, genre: str):
    """Add a book to the catalog."""
    fields = _require(isbn=isbn, title=title, author=author, genre=genre)
    print_result(_library(ctx).add_book(**fields))


@app.command("remove-book")
def cli_remove_book(ctx: typer.Context, isbn: str):
    """Remove an available book by ISBN."""
    fields = _require(isbn=isbn)
    print_result(_library(ctx).remove_book(fields["isbn"]))


@app.command("list")
def cli_list(ctx: typer.Context):
    """List every book in the catalog."""
    print_book_list(_library(ctx).list_books())


@app.command("search")
def cli_search(ctx: typer.Context, query: str = typer.Argument("", help="Title/Author/Genre/ISBN fragment")):
    """Search books; an empty query lists the whole catalog."""
    books = _library(ctx).search_books(InputValidator.clean(query))
    print_book_list(books, empty_message="No books found matching your search.", title="Search Results")


# ------------------------- Members ------------------------- #
@app.command("add-member")
def cli_add_member(ctx: typer.Context, member_id: str, name: str, email: str, phone: str):
    """Register a new member."""
    fields = _require(member_id=member_id, name=name, email=email, phone=phone)
    print_result(_library(ctx).add_member(**fields))


@app.command("remove-member")
def cli_remove_member(ctx: typer.Context, member_id: str):
    """Remove a member who holds no books."""
    fields = _require(member_id=member_id)
    print_result(_library(ctx).remove_member(fields["member_id"]))


@app.command("update-member")
def cli_update_member(
    ctx: typer.Context,
    member_id: str,
    name: Optional[str] = typer.Option(None, "--name", help="New name"),
    email: Optional[str] = typer.Option(None, "--email", help="New email"),
    phone: Optional[str] = typer.Option(None, "--phone", help="New phone"),
):
    """Change a member's contact details."""
    fields = _require(member_id=member_id)
    result = _library(ctx).update_member(
        fields["member_id"],
        name=InputValidator.optional(name),
        email=InputValidator.optional(email),
        phone=InputValidator.optional(phone),
    )
    print_result(result)


@app.command("members")
def cli_members(ctx: typer.Context):
    """List registered members."""
    print_member_list(_library(ctx).list_members())


# ------------------------- Loans ------------------------- #
@app.command("borrow")
def cli_borrow(ctx: typer.Context, isbn: str, member_id: str):
    """Lend a book to a member for the standard loan period."""
    fields = _require(isbn=isbn, member_id=member_id)
    print_result(_library(ctx).borrow_book(fields["isbn"], fields["member_id"]))


@app.command("return")
def cli_return(ctx: typer.Context, isbn: str):
    """Return a borrowed book, reporting days overdue if late."""
    fields = _require(isbn=isbn)
    result = _library(ctx).return_book(fields["isbn"])
    print_result(result)


def _holder_name(lib: Library):
    def holder(book) -> str:
        member = lib.borrower_of(book.isbn)
        return member.name if member else "Unknown"
    return holder


@app.command("borrowed")
def cli_borrowed(ctx: typer.Context):
    """List books currently out on loan."""
    lib = _library(ctx)
    print_book_list(lib.list_borrowed(), empty_message="No books are currently borrowed.",
                    holder=_holder_name(lib), title="Currently Borrowed Books")


@app.command("overdue")
def cli_overdue(ctx: typer.Context):
    """List borrowed books past their due date."""
    lib = _library(ctx)
    print_book_list(lib.list_overdue(), empty_message="No overdue books.",
                    holder=_holder_name(lib), overdue=lambda b: lib.overdue_days(b.isbn),
                    title="Overdue Books")


@app.command("report")
def cli_report(ctx: typer.Context):
    """Show catalog, membership and loan counts."""
    print_report(_library(ctx).library_report())


if __name__ == "__main__":
    app()
