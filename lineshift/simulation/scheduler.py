# lineshift/simulation/scheduler.py

import heapq
import logging
from typing import Callable, List, Optional, Tuple

from .event import Event, EventType, StageTransition, make_event


class EventScheduler:
    """Virtual clock plus a min-heap of pending events keyed on (time, sequence).

    Time only moves when an event is popped, and events sharing a timestamp
    come out in the order they were scheduled. Handlers run synchronously
    inside ``run`` and may schedule further events; the loop ends once
    nothing is left to fire.
    """

    def __init__(self):
        self.current_time = 0.0
        self._queue: List[Tuple[float, int, Event]] = []

    def schedule(self, time: float, type: EventType, payload: Optional[StageTransition] = None):
        if time < self.current_time:
            logging.warning(
                f"Scheduling {type.value} at {time:.2f}, before current time {self.current_time:.2f}"
            )
        heapq.heappush(self._queue, make_event(time, type, payload))

    def peek(self) -> Optional[Event]:
        return self._queue[0][2] if self._queue else None

    def run(self, handler: Callable[[Event], None]) -> int:
        handled = 0
        while self._queue:
            event = heapq.heappop(self._queue)[2]
            self.current_time = event.time
            logging.debug(f"Processing event {event.type.value} at sim time {self.current_time:.2f}")
            handler(event)
            handled += 1
        return handled

    def get_current_time(self) -> float:
        return self.current_time

    @property
    def pending(self) -> int:
        return len(self._queue)
