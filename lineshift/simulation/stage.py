# lineshift/simulation/stage.py

import logging
from typing import Callable, Dict, Optional

from .event import Event, EventType, StageTransition
from .scheduler import EventScheduler


class Stage:
    """A single-capacity machine on the line.

    At most one unit is in flight at a time. A breakdown keeps the stage
    busy for ``repair_duration`` and then retries the same unit against the
    same deadline; only a successful attempt costs processing plus setup
    time and produces a ``STAGE_COMPLETE`` event.
    """

    def __init__(
        self,
        name: str,
        index: int,
        scheduler: EventScheduler,
        processing_time: Dict[str, float],
        setup_time: Dict[str, float],
        random_source: Callable[[], float],
        failure_probability: float = 0.0,
        repair_duration: float = 0.0,
    ):
        self.name = name
        self.index = index
        self.scheduler = scheduler
        self.processing_time = dict(processing_time)
        self.setup_time = dict(setup_time)
        self.random_source = random_source
        self.failure_probability = failure_probability
        self.repair_duration = repair_duration
        self.busy = False

        # stats
        self.started = 0
        self.completed = 0
        self.breakdowns = 0
        self.abandoned = 0
        self.busy_hours = 0.0

    def start_processing(self, product_kind: str, deadline: float) -> bool:
        """Try to accept ``product_kind``; returns False if the unit was turned away."""
        if self.busy:
            logging.debug(f"Stage {self.name} busy, dropping {product_kind}")
            return False
        if not self._fits(product_kind, deadline):
            return False

        self.busy = True
        self.started += 1
        self._attempt(StageTransition(stage_index=self.index, product_kind=product_kind, deadline=deadline))
        return True

    def handle_event(self, event: Event) -> Optional[StageTransition]:
        """Apply one of this stage's own events.

        Returns the transition when a unit has finished and must be handed
        downstream, otherwise None.
        """
        transition = event.payload
        if event.type == EventType.STAGE_REPAIRED:
            self._retry(transition)
            return None
        if event.type == EventType.STAGE_COMPLETE:
            self.busy = False
            self.completed += 1
            logging.info(
                f"Machine {self.name} finished processing {transition.product_kind} "
                f"at time {self.scheduler.get_current_time():.2f}"
            )
            return transition
        raise ValueError(f"Stage {self.name} cannot handle {event.type.value}")

    def is_available(self) -> bool:
        return not self.busy

    def _fits(self, product_kind: str, deadline: float) -> bool:
        now = self.scheduler.get_current_time()
        if now + self.processing_time[product_kind] > deadline:
            logging.debug(
                f"Stage {self.name} rejected {product_kind}: "
                f"{now:.2f} + {self.processing_time[product_kind]:.2f} exceeds deadline {deadline:.2f}"
            )
            return False
        return True

    def _retry(self, transition: StageTransition):
        # still holding the unit, so only the deadline is re-checked
        if not self._fits(transition.product_kind, transition.deadline):
            self.busy = False
            self.abandoned += 1
            logging.info(f"Machine {self.name} abandoned {transition.product_kind} after repair")
            return
        self._attempt(transition)

    def _attempt(self, transition: StageTransition):
        now = self.scheduler.get_current_time()
        kind = transition.product_kind
        logging.info(f"Machine {self.name} started processing {kind} at time {now:.2f}")

        if self.random_source() < self.failure_probability:
            self.breakdowns += 1
            self.busy_hours += self.repair_duration
            logging.info(f"Machine {self.name} broke down! Maintenance required.")
            self.scheduler.schedule(now + self.repair_duration, EventType.STAGE_REPAIRED, transition)
            return

        total_time = self.processing_time[kind] + self.setup_time[kind]
        self.busy_hours += total_time
        self.scheduler.schedule(now + total_time, EventType.STAGE_COMPLETE, transition)

    def __repr__(self) -> str:
        return f"Stage({self.name}, busy={self.busy}, completed={self.completed})"
