import os
import json
from datetime import date
from typing import Any, Callable, Dict, List, Optional
from rich.console import Console
from rich.table import Table
from rich.panel import Panel

# Environment variable to control CLI output mode
# Allowed values: 'plain' (default), 'json', 'rich'
OUTPUT_MODE_ENV = "LIB_CLI_OUTPUT"

_console = Console()

def set_output_mode(mode: str) -> None:
    mode = (mode or "").lower().strip()
    if mode in {"plain", "json", "rich"}:
        os.environ[OUTPUT_MODE_ENV] = mode

def get_output_mode() -> str:
    return os.environ.get(OUTPUT_MODE_ENV, "plain").lower()

def _fmt(d: Optional[date]) -> str:
    return d.strftime("%d-%m-%Y") if d else ""

def print_book_list(books: List[Any], empty_message: str = "No books in the library.",
                    holder: Optional[Callable[[Any], str]] = None,
                    overdue: Optional[Callable[[Any], int]] = None, title: str = "Books") -> None:
    """Print books in the current output mode.

    ``holder`` and ``overdue`` add "Borrowed by" and "Overdue by" columns for loan listings.
    """
    mode = get_output_mode()

    if not books:
        print("[]" if mode == "json" else empty_message)
        return

    if mode == "json":
        payload = []
        for b in books:
            row = b.to_dict()
            if holder:
                row["holder"] = holder(b)
            if overdue:
                row["overdue_days"] = overdue(b)
            payload.append(row)
        print(json.dumps(payload, ensure_ascii=False))
    elif mode == "rich":
        table = Table(title=f"📚 {title}", show_lines=True, header_style="bold cyan")
        table.add_column("ISBN", style="magenta", no_wrap=True)
        table.add_column("Title", style="white")
        table.add_column("Author", style="white")
        table.add_column("Genre", style="white")
        table.add_column("Status", style="green")
        if holder:
            table.add_column("Borrowed by", style="white")
            table.add_column("Due", style="yellow")
        if overdue:
            table.add_column("Overdue (days)", style="red")
        for b in books:
            cells = [b.isbn, b.title, b.author, b.genre, b.status]
            if holder:
                cells += [holder(b), _fmt(b.due_date)]
            if overdue:
                cells.append(str(overdue(b)))
            table.add_row(*cells)
        _console.print(table)
    else:
        for b in books:
            line = str(b)
            if holder:
                line += f" | Borrowed by: {holder(b)} | Due: {_fmt(b.due_date)}"
            if overdue:
                line += f" | Overdue by: {overdue(b)} days"
            print(line)

def print_member_list(members: List[Any]) -> None:
    mode = get_output_mode()

    if not members:
        print("[]" if mode == "json" else "No members registered.")
        return

    if mode == "json":
        print(json.dumps([m.to_dict() for m in members], ensure_ascii=False))
    elif mode == "rich":
        table = Table(title="👥 Members", show_lines=True, header_style="bold cyan")
        table.add_column("ID", style="magenta", no_wrap=True)
        table.add_column("Name", style="white")
        table.add_column("Email", style="white")
        table.add_column("Phone", style="white")
        table.add_column("Borrowed", style="green")
        table.add_column("Member Since", style="white")
        for m in members:
            table.add_row(m.member_id, m.name, m.email, m.phone, str(m.borrowed_count), _fmt(m.membership_date))
        _console.print(table)
    else:
        for m in members:
            print(str(m))

def print_result(result: Any) -> None:
    """Print an OperationResult message, or its JSON form in json mode."""
    mode = get_output_mode()
    if mode == "json":
        print(json.dumps(result.to_dict(), ensure_ascii=False))
        return

    if mode == "rich":
        style = "green" if result.ok else "red"
        _console.print(f"[{style}]{result.message}[/]")
    else:
        print(result.message)
    if not result.persisted:
        print("Warning: the change could not be saved to disk.")

def print_report(report: Dict[str, int]) -> None:
    """Print the library report.
    - plain: one 'Label: value' line per count
    - json: JSON object
    - rich: Panel with the counts
    """
    mode = get_output_mode()
    labels = [
        ("total_books", "Total Books"),
        ("total_members", "Total Members"),
        ("available_books", "Available Books"),
        ("borrowed_books", "Borrowed Books"),
        ("overdue_books", "Overdue Books"),
    ]

    if mode == "json":
        print(json.dumps(report, ensure_ascii=False))
    elif mode == "rich":
        content = "\n".join(f"[bold]{label}:[/] {report.get(key, 0)}" for key, label in labels)
        _console.print(Panel.fit(content, title="📊 Library Report", border_style="blue"))
    else:
        for key, label in labels:
            print(f"{label}: {report.get(key, 0)}")
