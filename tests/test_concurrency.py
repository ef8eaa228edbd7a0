"""
tests/test_concurrency.py

Concurrency safety tests for SettlementCell.
Settlement and registration race from several threads; the cell must
still settle once and notify every observer exactly once.

Run:
    pytest tests/test_concurrency.py -v --tb=short
"""

import threading

from pledge import CellState, Deferred, DeferredQueue, SettlementCell


class GatedQueue(DeferredQueue):
    """DeferredQueue whose first call_soon() blocks until released."""

    def __init__(self):
        super().__init__()
        self.entered = threading.Event()
        self.release = threading.Event()
        self._gated = False

    def call_soon(self, callback):
        if not self._gated:
            self._gated = True
            self.entered.set()
            self.release.wait(timeout=5)
        super().call_soon(callback)


class TestConcurrency:

    def test_racing_settlers_leave_one_outcome(self):
        """Eight threads settle at once; exactly one outcome survives."""
        queue = DeferredQueue()
        deferred = Deferred(scheduler=queue)
        barrier = threading.Barrier(8)
        errors = []

        def settle(i):
            try:
                barrier.wait()
                if i % 2:
                    deferred.resolve(i)
                else:
                    deferred.reject(i)
            except Exception as e:
                errors.append(str(e))

        threads = [threading.Thread(target=settle, args=(i,)) for i in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert errors == [], f"Concurrent settlement raised exceptions: {errors}"

        seen = []
        deferred.cell.on_success(seen.append).on_failure(seen.append)
        queue.run_until_idle()

        assert deferred.cell.state in (CellState.FULFILLED, CellState.REJECTED)
        assert len(seen) == 1, f"Expected one notification, got {seen}"

    def test_registration_during_settlement(self):
        """Every observer fires exactly once, whichever side of settlement it landed on."""
        queue = DeferredQueue()
        deferred = Deferred(scheduler=queue)
        counts = []
        lock = threading.Lock()
        barrier = threading.Barrier(5)

        def on_value(value):
            with lock:
                counts.append(value)

        def register_50():
            barrier.wait()
            for _ in range(50):
                deferred.cell.on_success(on_value)

        threads = [threading.Thread(target=register_50) for _ in range(4)]
        for t in threads:
            t.start()
        barrier.wait()
        deferred.resolve("v")
        for t in threads:
            t.join()

        queue.run_until_idle()

        assert len(counts) == 200, (
            f"Expected 200 notifications (50 per thread), got {len(counts)}. "
            f"Observers were lost or duplicated."
        )
        assert set(counts) == {"v"}

    def test_late_registration_cannot_overtake_settlement(self):
        """
        Observers registered while the settlement dispatch is being queued
        still run after the observers registered before settlement.
        """
        queue = GatedQueue()
        triggers = {}
        cell = SettlementCell(
            lambda ok, fail: triggers.update(fulfill=ok), scheduler=queue
        )
        calls = []

        cell.on_success(lambda v: calls.append(("h1", v)))
        cell.on_settle(lambda: calls.append("f1"))

        settler = threading.Thread(target=triggers["fulfill"], args=(7,))
        settler.start()
        assert queue.entered.wait(timeout=5), "Settlement never reached the scheduler"

        def register_late():
            cell.on_success(lambda v: calls.append(("h2", v)))
            cell.on_settle(lambda: calls.append("f2"))

        registrar = threading.Thread(target=register_late)
        registrar.start()
        # Give the registrar every chance to slip in ahead of the dispatch
        registrar.join(timeout=0.2)

        queue.release.set()
        settler.join(timeout=5)
        registrar.join(timeout=5)
        queue.run_until_idle()

        assert calls == [("h1", 7), "f1", ("h2", 7), "f2"], (
            f"Observers delivered out of order: {calls}"
        )
