from datetime import date, timedelta

import pytest

from database import LibraryDatabase
from library import Library


class FakeClock:
    """Controllable stand-in for date.today()."""

    def __init__(self, start: date) -> None:
        self.current = start

    def __call__(self) -> date:
        return self.current

    def advance(self, days: int) -> None:
        self.current += timedelta(days=days)


@pytest.fixture(autouse=True)
def plain_output(monkeypatch):
    # The CLI stores the chosen output mode in the environment; keep tests isolated
    monkeypatch.setenv("LIB_CLI_OUTPUT", "plain")


@pytest.fixture
def clock():
    return FakeClock(date(2024, 3, 1))


@pytest.fixture
def db(tmp_path):
    # Unique store files for every test
    return LibraryDatabase(str(tmp_path / "books.db"), str(tmp_path / "members.db"))


@pytest.fixture
def lib(db, clock):
    return Library(db, today=clock)
