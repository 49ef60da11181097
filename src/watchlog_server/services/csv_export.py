"""CSV export of the watch history."""

import csv
import io
from datetime import date
from typing import Optional

from ..models.watch_entry import WatchEntry

HEADERS = [
    "Name",
    "Type",
    "Platform",
    "Status",
    "Rating",
    "Date Watched",
    "Season",
    "Episode",
    "Genres",
    "Watch Again",
    "Notes",
]


def _row(entry: WatchEntry) -> list[str]:
    return [
        entry.title,
        "Series" if entry.is_series else "Movie",
        entry.platform or "",
        entry.status.value if entry.status else "",
        str(entry.rating),
        entry.watch_date,
        str(entry.season) if entry.season is not None else "",
        str(entry.episode) if entry.episode is not None else "",
        ";".join(entry.genres or []),
        "Yes" if entry.watch_again else "No",
        (entry.notes or "").replace(",", ";"),
    ]


def export_entries_csv(entries: list[WatchEntry], today: Optional[date] = None) -> tuple[str, str]:
    """
    Render entries as CSV, one row per entry with every value quoted.

    Args:
        entries: Entries to export
        today: Date used in the filename (defaults to today)

    Returns:
        Tuple of (filename, CSV text)
    """
    today = today or date.today()

    buffer = io.StringIO()
    writer = csv.writer(buffer, quoting=csv.QUOTE_ALL, lineterminator="\n")
    writer.writerow(HEADERS)
    for entry in entries:
        writer.writerow(_row(entry))

    return f"watch-history-{today.isoformat()}.csv", buffer.getvalue()
