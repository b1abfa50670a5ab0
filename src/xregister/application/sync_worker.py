# src/xregister/application/sync_worker.py
"""
Sync Worker - Periodic Exchange Rate Synchronization

Runs one sync cycle immediately and then every interval until stopped.
A cycle walks the cartesian product of source × target currencies (outer
loop over sources, inner over targets), skips self-pairs, and syncs each
remaining pair one at a time. A failing pair is logged and recorded in the
cycle report; the cycle moves on to the next pair.

The stop signal is a threading.Event. It ends the interval wait at once,
is checked before every pair (a pair already being synced finishes), and
can be set any number of times.

Files that USE this module:
- xregister.app (sync and serve --sync commands)
- tests.test_sync_worker (unit tests)

Files that this module USES:
- xregister.application.use_cases (SyncExchangeRateUseCase)
- xregister.domain.models (CurrencyPair)
- xregister.domain.errors (PairFailure)
"""
from __future__ import annotations  # Enable postponed evaluation of annotations

import enum  # Worker state enumeration
import logging  # Standard library for logging messages
import threading  # Background thread and stop event
from dataclasses import dataclass, field  # Cycle report container
from datetime import datetime, timezone  # Cycle timestamps
from typing import Callable, Iterator, Optional, Sequence  # Type hints

from xregister.application.use_cases import SyncExchangeRateUseCase  # Per-pair sync
from xregister.domain.errors import PairFailure  # Per-pair failure record
from xregister.domain.models import CurrencyPair  # Pair value object

logger = logging.getLogger(__name__)


class WorkerState(enum.Enum):
    IDLE = "idle"
    RUNNING = "running"
    SLEEPING = "sleeping"
    STOPPED = "stopped"


@dataclass
class CycleReport:
    """
    Outcome of one sync cycle.
    
    Attributes:
        started_at: UTC time the cycle began
        synced: Pairs synced successfully, in sync order
        skipped: Self-pairs that were skipped
        failures: One PairFailure per failed pair
        interrupted: True if the stop signal cut the cycle short
    """
    started_at: datetime
    synced: list[CurrencyPair] = field(default_factory=list)
    skipped: list[CurrencyPair] = field(default_factory=list)
    failures: list[PairFailure] = field(default_factory=list)
    interrupted: bool = False

    @property
    def ok(self) -> bool:
        return not self.failures and not self.interrupted


def iter_pairs(sources: Sequence[str], targets: Sequence[str]) -> Iterator[CurrencyPair]:
    """Yield every (source, target) pair, sources outer and targets inner."""
    for source in sources:
        for target in targets:
            yield CurrencyPair(source, target)


class SyncWorker:
    """Drives sync cycles on a fixed interval until stopped."""

    def __init__(
        self,
        use_case: SyncExchangeRateUseCase,
        sources: Sequence[str],
        targets: Sequence[str],
        interval: float,
        stop_event: Optional[threading.Event] = None,
        wait: Optional[Callable[[float], bool]] = None,
    ):
        """
        Initialize the worker.
        
        Args:
            use_case: Syncs a single pair (fetch + persist)
            sources: Source currencies, in configuration order
            targets: Target currencies, in configuration order
            interval: Seconds to wait between the end of one cycle and the next
            stop_event: Stop signal; a fresh Event is created when omitted
            wait: Waits up to N seconds and returns True if stopped meanwhile;
                defaults to stop_event.wait
        """
        if interval <= 0:
            raise ValueError("interval must be positive")
        self.use_case = use_case
        self.sources = list(sources)
        self.targets = list(targets)
        self.interval = interval
        self.stop_event = stop_event or threading.Event()
        self._wait = wait or self.stop_event.wait
        self._thread: Optional[threading.Thread] = None
        self.state = WorkerState.IDLE
        self.cycles_completed = 0
        self.last_report: Optional[CycleReport] = None

    @property
    def stopped(self) -> bool:
        return self.stop_event.is_set()

    def run_cycle(self) -> CycleReport:
        """
        Run one full pass over all configured pairs.
        
        Never raises for a single pair's failure; the failure is logged and
        recorded in the returned report.
        """
        report = CycleReport(started_at=datetime.now(timezone.utc))
        for pair in iter_pairs(self.sources, self.targets):
            if pair.is_self_pair:
                report.skipped.append(pair)
                continue
            if self.stopped:
                logger.info("Stop requested, not starting %s", pair)
                report.interrupted = True
                break
            try:
                rate = self.use_case.execute(pair)
            except Exception as e:
                failure = PairFailure(pair, e)
                report.failures.append(failure)
                logger.error("Failed to sync exchange rate %s: %s", pair, e)
                continue
            report.synced.append(pair)
            logger.info("Synced %s: %s", pair, rate)

        logger.info(
            "Sync cycle finished: %d synced, %d failed, %d skipped%s",
            len(report.synced),
            len(report.failures),
            len(report.skipped),
            " (interrupted)" if report.interrupted else "",
        )
        self.last_report = report
        return report

    def run(self) -> None:
        """Run cycles until stopped; the first cycle starts immediately."""
        logger.info(
            "Sync worker running: %d source(s) × %d target(s), every %ss",
            len(self.sources), len(self.targets), self.interval,
        )
        while not self.stopped:
            self.state = WorkerState.RUNNING
            self.run_cycle()
            self.cycles_completed += 1
            if self.stopped:
                break
            self.state = WorkerState.SLEEPING
            if self._wait(self.interval):
                break
        self.state = WorkerState.STOPPED
        logger.info("Sync worker stopped after %d cycle(s)", self.cycles_completed)

    def start(self) -> threading.Thread:
        """Run the worker on a background daemon thread."""
        if self._thread is not None and self._thread.is_alive():
            return self._thread
        self._thread = threading.Thread(target=self.run, name="sync-worker", daemon=True)
        self._thread.start()
        return self._thread

    def stop(self) -> None:
        """Signal the worker to stop. Safe to call more than once."""
        if not self.stop_event.is_set():
            logger.info("Stopping sync worker")
        self.stop_event.set()

    def join(self, timeout: Optional[float] = None) -> None:
        if self._thread is not None:
            self._thread.join(timeout)
