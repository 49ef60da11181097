"""Device-local set of dismissed alert ids."""

from pathlib import Path

from ..models.alerts import NewSeasonAlert
from .local_store import JsonFileStore

STORAGE_FILE = "dismissed-season-alerts.json"


class AlertDismissalStore:
    """Remembers which alerts the user dismissed.

    Without usable storage nothing is ever dismissed.
    """

    def __init__(self, state_dir: Path):
        self._store = JsonFileStore(Path(state_dir) / STORAGE_FILE)

    def get_dismissed(self) -> set[str]:
        data = self._store.load()
        if not isinstance(data, list):
            return set()
        return {item for item in data if isinstance(item, str)}

    def is_dismissed(self, alert_id: str) -> bool:
        return alert_id in self.get_dismissed()

    def dismiss(self, alert_id: str) -> None:
        """Record a dismissal. Dismissing twice is the same as once."""
        dismissed = self.get_dismissed()
        if alert_id in dismissed:
            return
        dismissed.add(alert_id)
        self._store.save(sorted(dismissed))

    def clear_all(self) -> None:
        """Forget every dismissal."""
        self._store.clear()

    def filter_visible(self, alerts: list[NewSeasonAlert]) -> list[NewSeasonAlert]:
        """Drop alerts that have been dismissed."""
        dismissed = self.get_dismissed()
        return [alert for alert in alerts if alert.id not in dismissed]
