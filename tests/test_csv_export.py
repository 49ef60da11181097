"""Tests for CSV export."""

import csv
import io
from datetime import date

from watchlog_server.models.watch_entry import EntryKind, EntryStatus, WatchEntry
from watchlog_server.services.csv_export import HEADERS, export_entries_csv


def test_export_filename_and_header():
    filename, content = export_entries_csv([], today=date(2026, 10, 19))

    assert filename == "watch-history-2026-10-19.csv"
    assert content == '"' + '","'.join(HEADERS) + '"\n'


def test_export_row_values():
    entry = WatchEntry(
        id="1",
        title='Say "Hi", Again',
        watch_date="2026-03-04",
        kind=EntryKind.SERIES,
        rating=4,
        platform="Netflix",
        status=EntryStatus.WATCHING,
        season=2,
        episode=5,
        genres=["Drama", "Comedy"],
        watch_again=True,
        notes="great, funny",
    )

    _, content = export_entries_csv([entry], today=date(2026, 10, 19))
    rows = list(csv.reader(io.StringIO(content)))

    assert len(rows) == 2
    assert rows[1] == [
        'Say "Hi", Again',
        "Series",
        "Netflix",
        "watching",
        "4",
        "2026-03-04",
        "2",
        "5",
        "Drama;Comedy",
        "Yes",
        "great; funny",
    ]
    assert content.splitlines()[1].startswith('"Say ""Hi"", Again","Series"')


def test_export_blank_optionals():
    entry = WatchEntry(id="1", title="Dune", watch_date="2026-01-01")

    _, content = export_entries_csv([entry])
    rows = list(csv.reader(io.StringIO(content)))

    assert rows[1] == ["Dune", "Movie", "", "", "0", "2026-01-01", "", "", "", "No", ""]
