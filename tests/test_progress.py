"""Tests for season progress and optimistic seen toggles."""

import pytest

from watchlog_server.core.errors import ConfigurationError, PersistencePermissionError
from watchlog_server.models.metadata import EpisodeInfo, SeasonEpisodes
from watchlog_server.models.progress import SeasonProgress
from watchlog_server.services.optimistic import optimistic_update
from watchlog_server.services.progress_tracker import ProgressTracker, SeasonChecklist


class FakeTracker(ProgressTracker):
    """Progress tracker with in-memory seen flags."""

    def __init__(self, tmdb_client=None, seen=None, fail_writes=False):
        super().__init__(tmdb_client)
        self.seen = dict(seen or {})
        self.fail_writes = fail_writes
        self.writes = []

    async def get_all_seen_seasons(self, series_id):
        return dict(self.seen)

    async def set_season_seen(self, series_id, season_number, seen):
        self.writes.append((series_id, season_number, seen))
        if self.fail_writes:
            raise PersistencePermissionError("Database permission denied for 'series_progress'.")
        self.seen[season_number] = seen


class FakeMetadata:
    def __init__(self, season_numbers):
        self.season_numbers = season_numbers

    async def get_all_seasons(self, tv_id):
        return [
            SeasonEpisodes(
                season_number=n,
                episodes=[EpisodeInfo(episode_number=1, title="Pilot", tmdb_id=n)],
            )
            for n in self.season_numbers
        ]


@pytest.mark.parametrize(
    "watched,total,percentage",
    [(0, 0, 0), (1, 3, 33), (2, 3, 67), (3, 3, 100)],
)
def test_progress_percentage(watched, total, percentage):
    progress = SeasonProgress.compute(watched, total)

    assert progress.percentage == percentage
    assert 0 <= progress.percentage <= 100


async def test_progress_counts_seen_listed_seasons():
    """Seasons never toggled count as unseen; unknown seasons are ignored."""
    tracker = FakeTracker(FakeMetadata([1, 2, 3]), seen={1: True, 2: False, 9: True})

    progress = await tracker.get_progress(100)

    assert (progress.watched, progress.total, progress.percentage) == (1, 3, 33)


async def test_progress_requires_metadata_client():
    with pytest.raises(ConfigurationError):
        await FakeTracker().get_progress(100)


async def test_toggle_flips_and_persists():
    tracker = FakeTracker(seen={1: True})
    checklist = await SeasonChecklist.load(tracker, 100)

    assert await checklist.toggle(2) is True
    assert await checklist.toggle(1) is False

    assert checklist.seen == {1: False, 2: True}
    assert tracker.writes == [(100, 2, True), (100, 1, False)]


async def test_failed_toggle_rolls_back():
    """A failed write restores the previous flag and surfaces the error."""
    tracker = FakeTracker(seen={1: True}, fail_writes=True)
    checklist = await SeasonChecklist.load(tracker, 100)

    with pytest.raises(PersistencePermissionError):
        await checklist.toggle(1)
    with pytest.raises(PersistencePermissionError):
        await checklist.toggle(2)

    assert checklist.seen == {1: True}


async def test_optimistic_update_shows_value_before_commit():
    state = {"a": 1}
    seen_during_commit = []

    async def commit():
        seen_during_commit.append(state["a"])

    await optimistic_update(state, "a", 2, commit)

    assert seen_during_commit == [2]
    assert state == {"a": 2}


async def test_optimistic_update_only_rolls_back_its_key():
    state = {"a": 1, "b": 1}

    async def commit():
        state["b"] = 5
        raise RuntimeError("write failed")

    with pytest.raises(RuntimeError):
        await optimistic_update(state, "a", 2, commit)

    assert state == {"a": 1, "b": 5}
