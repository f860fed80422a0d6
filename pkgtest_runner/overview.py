"""Invariant-checked counters for a group of tests or a group of suites."""

import time


class InvalidStateError(Exception):
    """Raised when a GroupOverview is used outside of its lifecycle."""


class GroupOverview:
    """Tally of passed, failed, skipped and not reached tests.

    Tracks anything test-like: the tests of one runner, or the runners of a
    whole orchestration. Counting is strict:

    * ``add_to_total`` must cover an item before it is passed, failed or
      skipped, otherwise the tally is rejected.
    * ``finalize`` must be called before any value can be read, and nothing
      can be recorded afterwards.

    ``not_reached`` is derived on finalize as whatever part of the total was
    never passed, failed or skipped (i.e. cut off by a fail fast).
    """

    def __init__(self) -> None:
        self._total = 0
        self._passed = 0
        self._failed = 0
        self._skipped = 0
        self._not_reached = 0
        self._start: float | None = None
        self._elapsed_ms = 0
        self._failed_fast = False
        self._finalized = False

    def __repr__(self) -> str:
        state = "finalized" if self._finalized else "accumulating"
        return (
            f"GroupOverview({state}, total={self._total}, passed={self._passed}, "
            f"failed={self._failed}, skipped={self._skipped})"
        )

    @property
    def total(self) -> int:
        self._ensure_finalized()
        return self._total

    @property
    def passed(self) -> int:
        self._ensure_finalized()
        return self._passed

    @property
    def failed(self) -> int:
        self._ensure_finalized()
        return self._failed

    @property
    def skipped(self) -> int:
        self._ensure_finalized()
        return self._skipped

    @property
    def not_reached(self) -> int:
        self._ensure_finalized()
        return self._not_reached

    @property
    def elapsed_ms(self) -> int:
        self._ensure_finalized()
        return self._elapsed_ms

    @property
    def failed_fast(self) -> bool:
        self._ensure_finalized()
        return self._failed_fast

    @property
    def finalized(self) -> bool:
        return self._finalized

    def add_to_total(self, n: int) -> None:
        self._ensure_not_finalized()
        self._total += _non_negative(n)

    def start_time(self) -> None:
        self._ensure_not_finalized()
        if self._start is not None:
            raise InvalidStateError("Can only start time once!")
        self._start = time.monotonic()

    def pass_(self, n: int) -> None:
        self._ensure_not_finalized()
        self._ensure_within_total(self._passed + _non_negative(n), "pass")
        self._passed += n

    def fail(self, n: int) -> None:
        self._ensure_not_finalized()
        self._ensure_within_total(self._failed + _non_negative(n), "fail")
        self._failed += n

    def skip(self, n: int) -> None:
        self._ensure_not_finalized()
        self._ensure_within_total(self._skipped + _non_negative(n), "skip")
        self._skipped += n

    def finalize(self, failed_fast: bool = False) -> None:
        """Freeze the tally and derive ``not_reached``.

        Calling it again is a no-op so that every owner of an overview can
        finalize it on its own exit path.
        """
        if self._finalized:
            return
        if self._start is not None:
            self._elapsed_ms = int((time.monotonic() - self._start) * 1000)
        self._not_reached = self._total - (
            self._passed + self._failed + self._skipped
        )
        self._failed_fast = failed_fast
        self._finalized = True

    def _ensure_within_total(self, new_count: int, action: str) -> None:
        recorded = self._passed + self._failed + self._skipped
        current = {
            "pass": self._passed,
            "fail": self._failed,
            "skip": self._skipped,
        }[action]
        if recorded - current + new_count > self._total:
            raise InvalidStateError(
                "Unexpected condition when recording tests! Total of skipped + "
                f"failed + passed is greater than total: {self._total}"
            )

    def _ensure_finalized(self) -> None:
        if not self._finalized:
            raise InvalidStateError(
                "Must finalize an overview before retrieving its values!"
            )

    def _ensure_not_finalized(self) -> None:
        if self._finalized:
            raise InvalidStateError("Overview has already been finalized! Cannot change!")


def _non_negative(n: int) -> int:
    if n < 0:
        raise ValueError(f"Counts must be non-negative, got {n}")
    return n
