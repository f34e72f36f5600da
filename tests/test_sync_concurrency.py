"""Tests for the concurrency limiter."""

import threading
import time

import pytest

from dirmirror.sync.concurrency import ConcurrencyLimiter


class TestConcurrencyLimiter:
    """Tests for ConcurrencyLimiter."""

    def test_invalid_limit(self):
        with pytest.raises(ValueError, match="positive"):
            ConcurrencyLimiter(0)

    def test_submit_requires_running_limiter(self):
        limiter = ConcurrencyLimiter(2)
        with pytest.raises(RuntimeError, match="not running"):
            limiter.submit(print)

    def test_returns_results(self):
        with ConcurrencyLimiter(2) as limiter:
            futures = [limiter.submit(pow, 2, n) for n in range(5)]
            assert [f.result() for f in futures] == [1, 2, 4, 8, 16]

    def test_ceiling_is_respected(self):
        """More tasks than slots never run more than `limit` at once."""
        lock = threading.Lock()
        running = 0
        observed = 0

        def work():
            nonlocal running, observed
            with lock:
                running += 1
                observed = max(observed, running)
            time.sleep(0.01)
            with lock:
                running -= 1

        with ConcurrencyLimiter(3) as limiter:
            futures = [limiter.submit(work) for _ in range(20)]
            for future in futures:
                future.result()

        assert observed <= 3
        assert limiter.peak <= 3
        assert limiter.active == 0

    def test_submit_does_not_block_caller(self):
        """Queued tasks wait for a slot, the caller does not."""
        release = threading.Event()

        with ConcurrencyLimiter(1) as limiter:
            first = limiter.submit(release.wait, 5)
            second = limiter.submit(lambda: "done")
            assert not second.done()
            release.set()
            assert first.result() is True
            assert second.result() == "done"

    def test_errors_propagate_through_future(self):
        def fail():
            raise OSError("boom")

        with ConcurrencyLimiter(2) as limiter:
            future = limiter.submit(fail)
            with pytest.raises(OSError, match="boom"):
                future.result()

        assert limiter.active == 0
