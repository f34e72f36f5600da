"""Tests for progress tracking and statistics."""

import threading

from dirmirror.sync.progress import (
    SyncProgressEvent,
    SyncProgressInfo,
    SyncProgressTracker,
    SyncStats,
)


class TestSyncProgressTracker:
    """Tests for SyncProgressTracker."""

    def test_emit_calls_callback(self):
        events = []
        tracker = SyncProgressTracker(callback=events.append)

        tracker.emit(SyncProgressEvent.FILE_COPIED, "a.txt", 10)

        assert events == [SyncProgressInfo(SyncProgressEvent.FILE_COPIED, "a.txt", 10)]

    def test_emit_without_callback(self):
        """A tracker without callback ignores events."""
        SyncProgressTracker().emit(SyncProgressEvent.FILE_SKIPPED, "a.txt")


class TestSyncStats:
    """Tests for SyncStats."""

    def test_add(self):
        stats = SyncStats()
        stats.add("copied")
        stats.add("bytes_copied", 100)

        assert stats.copied == 1
        assert stats.bytes_copied == 100

    def test_add_from_threads(self):
        stats = SyncStats()

        def work():
            for _ in range(1000):
                stats.add("skipped")

        threads = [threading.Thread(target=work) for _ in range(8)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert stats.skipped == 8000

    def test_to_dict_hides_lock(self):
        data = SyncStats(copied=2).to_dict()

        assert data["copied"] == 2
        assert "_lock" not in data
