"""Tick scheduling, kept apart from wall-clock timing."""
import logging
import threading

logger = logging.getLogger(__name__)


class TickScheduler:
    """Runs a tick function on demand.

    The tick function returns False when the game has reached a terminal
    state; the scheduler then cancels itself and every later ``advance``
    runs nothing.
    """

    def __init__(self, tick_fn):
        self.tick_fn = tick_fn
        self.cancelled = False
        self.ticks_run = 0

    def advance(self, n_ticks=1):
        """Run up to ``n_ticks`` ticks and return how many actually ran."""
        if n_ticks < 0:
            raise ValueError(f"Cannot advance a negative number of ticks: {n_ticks}")
        ran = 0
        while ran < n_ticks and not self.cancelled:
            keep_going = self.tick_fn()
            ran += 1
            if keep_going is False:
                self.cancel()
        self.ticks_run += ran
        return ran

    def cancel(self):
        self.cancelled = True


class RealtimeTicker:
    """Drives a TickScheduler from a periodic timer.

    Fires every ``interval`` seconds on a chain of daemon timers until
    stopped or until the scheduler is cancelled. Each tick runs while
    holding ``lock``, which should be the lock that guards the state the
    scheduler's tick function mutates.
    """

    def __init__(self, scheduler, interval=1.0, lock=None):
        if interval <= 0:
            raise ValueError(f"Tick interval must be positive: {interval}")
        self.scheduler = scheduler
        self.interval = interval
        self.tick_lock = lock if lock is not None else threading.RLock()
        self._timer = None
        self._stopped = True
        self._lock = threading.Lock()

    @property
    def running(self):
        return not self._stopped

    def start(self):
        with self._lock:
            if not self._stopped:
                return
            self._stopped = False
            self._schedule()

    def stop(self):
        with self._lock:
            self._stopped = True
            if self._timer is not None:
                self._timer.cancel()
                self._timer = None

    def _schedule(self):
        self._timer = threading.Timer(self.interval, self._fire)
        self._timer.daemon = True
        self._timer.start()

    def _fire(self):
        with self._lock:
            if self._stopped:
                return
        try:
            with self.tick_lock:
                self.scheduler.advance(1)
        except Exception:
            logger.exception("Tick failed; stopping realtime ticker")
            self.stop()
            return
        with self._lock:
            if self._stopped:
                return
            if self.scheduler.cancelled:
                self._stopped = True
                self._timer = None
                return
            self._schedule()
