"""
Cancellable scheduled tasks on a virtual millisecond clock.

Built on the standard library's `sched.scheduler` with a clock the host moves
forward explicitly via `advance()`. A real-time host advances it by the wall
time that passed; tests advance it by exact amounts, which keeps every
session fully deterministic apart from the random spawns it asks for.
"""

import logging
import sched
from typing import Callable, Optional, Set, Union

logger = logging.getLogger(__name__)

Interval = Union[int, Callable[[], int]]


class ScheduledTask:
    """
    Handle for a one-shot or repeating task.

    Attributes:
        name: label used in logs
        active: False once the task has fired (one-shot) or been cancelled
    """

    def __init__(self, scheduler: "TaskScheduler", name: str, interval: Optional[Interval] = None):
        self.name = name
        self.active = True
        self._scheduler = scheduler
        self._interval = interval
        self._event: Optional[sched.Event] = None

    @property
    def repeating(self) -> bool:
        return self._interval is not None

    def next_interval(self) -> int:
        interval = self._interval() if callable(self._interval) else self._interval
        if interval <= 0:
            raise ValueError(f"Task '{self.name}' needs a positive interval, got {interval}")
        return interval

    def cancel(self) -> None:
        """Stop the task; a no-op if it already fired or was cancelled."""
        if not self.active:
            return
        self.active = False
        if self._event is not None:
            self._scheduler._cancel_event(self._event)
            self._event = None
        self._scheduler._forget(self)

    def __repr__(self):
        return f"<ScheduledTask {self.name} active={self.active}>"


class TaskScheduler:
    """
    Owns the virtual clock and every pending timer of one session.
    """

    def __init__(self, start_ms: int = 0):
        self._now = start_ms
        self._sched = sched.scheduler(self.now, self._sleep)
        self._tasks: Set[ScheduledTask] = set()

    def now(self) -> int:
        """Current virtual time in ms."""
        return self._now

    def _sleep(self, delay) -> None:
        # Non-blocking runs only ever ask for a zero delay; time moves in advance()
        pass

    def call_later(self, delay_ms: int, action: Callable[[], None], name: str = "task") -> ScheduledTask:
        """Run `action` once, `delay_ms` from now."""
        task = ScheduledTask(self, name)
        self._tasks.add(task)

        def fire():
            task._event = None
            task.active = False
            self._forget(task)
            action()

        task._event = self._sched.enter(delay_ms, 0, fire)
        return task

    def call_every(self, interval: Interval, action: Callable[[], None], name: str = "task") -> ScheduledTask:
        """
        Run `action` repeatedly.

        `interval` may be a callable; it is read again before each reschedule
        so a task can follow a changing period (the game tick speeding up).
        """
        task = ScheduledTask(self, name, interval)
        self._tasks.add(task)

        def fire():
            task._event = None
            action()
            # The action may have cancelled its own task
            if task.active:
                task._event = self._sched.enter(task.next_interval(), 0, fire)

        task._event = self._sched.enter(task.next_interval(), 0, fire)
        return task

    def advance(self, ms: int) -> None:
        """
        Move the clock forward, firing due tasks in time order.

        The clock is set to each task's due time before it runs so that
        anything it schedules is measured from the right instant.
        """
        if ms < 0:
            raise ValueError("Cannot move the clock backwards")
        target = self._now + ms
        while True:
            queue = self._sched.queue
            if not queue or queue[0].time > target:
                break
            self._now = queue[0].time
            self._sched.run(blocking=False)
        self._now = target

    def cancel_all(self) -> None:
        """Cancel every pending task."""
        for task in list(self._tasks):
            task.cancel()

    @property
    def pending(self) -> int:
        """Number of tasks still waiting to fire."""
        return len(self._tasks)

    def _cancel_event(self, event: sched.Event) -> None:
        self._sched.cancel(event)

    def _forget(self, task: ScheduledTask) -> None:
        self._tasks.discard(task)
