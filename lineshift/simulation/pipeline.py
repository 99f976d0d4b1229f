# lineshift/simulation/pipeline.py

import logging
import random
from typing import Callable, List, Optional, Sequence

from lineshift.api.schemas import SimulationConfig, SimulationReport, StageReport
from lineshift.metrics.throughput import stage_utilization, throughput_per_hour
from lineshift.utils.backlog import seed_backlog
from .event import Event, EventType, StageTransition
from .scheduler import EventScheduler
from .stage import Stage


class ManufacturingSystem:
    def __init__(self, config: SimulationConfig, random_sources: Optional[Sequence[Callable[[], float]]] = None):
        self.config = config
        self.scheduler = EventScheduler()

        if random_sources is None:
            random_sources = [self._stage_rng(i) for i in range(len(config.stages))]
        elif len(random_sources) != len(config.stages):
            raise ValueError(f"Expected {len(config.stages)} random sources, got {len(random_sources)}")

        self.stages: List[Stage] = [
            Stage(
                name=spec.name,
                index=i,
                scheduler=self.scheduler,
                processing_time=spec.processing_time,
                setup_time=spec.setup_time,
                random_source=random_sources[i],
                failure_probability=spec.failure_probability,
                repair_duration=spec.repair_duration,
            )
            for i, spec in enumerate(config.stages)
        ]
        self.backlog = seed_backlog(config.product_kinds, config.backlog_repetitions)

        self.shift_length_hours = config.shift_length_hours
        self.total_shifts = config.total_shifts
        self.current_shift = 0
        self.shift_end_time = 0.0
        self.completed_count = 0
        self.rejected_by_stage = [0] * len(self.stages)
        self.finished = False
        self.report: Optional[SimulationReport] = None

        self._handlers = {
            EventType.SHIFT_START: lambda event: self.start_shift(),
            EventType.SHIFT_END: lambda event: self.end_shift(),
            EventType.STAGE_COMPLETE: self._handle_stage_event,
            EventType.STAGE_REPAIRED: self._handle_stage_event,
        }

    def _stage_rng(self, index: int) -> Callable[[], float]:
        if self.config.seed is None:
            return random.Random().random
        return random.Random(f"{self.config.seed}:{index}").random

    # ------------------------------
    # Public Simulation Loop
    # ------------------------------
    def run(self) -> SimulationReport:
        logging.info(
            f"ManufacturingSystem started: {self.total_shifts} shift(s) of {self.shift_length_hours}h, "
            f"{len(self.backlog)} item(s) in backlog"
        )
        self.scheduler.schedule(0.0, EventType.SHIFT_START)
        self.scheduler.run(self._handle_event)
        logging.info(f"ManufacturingSystem finished, queue drained at {self.scheduler.get_current_time():.2f}")
        return self.report

    def _handle_event(self, event: Event):
        self._handlers[event.type](event)

    # ------------------------------
    # Shifts
    # ------------------------------
    def start_shift(self):
        self.current_shift += 1
        now = self.scheduler.get_current_time()
        self.shift_end_time = now + self.shift_length_hours
        logging.info(f"Shift {self.current_shift} started at time {now:.2f}")
        self.scheduler.schedule(self.shift_end_time, EventType.SHIFT_END)
        self.feed_backlog()

    def end_shift(self):
        now = self.scheduler.get_current_time()
        logging.info(f"Shift {self.current_shift} ended at time {now:.2f}")
        if self.current_shift < self.total_shifts:
            self.scheduler.schedule(now, EventType.SHIFT_START)
        else:
            # the tally is taken when the last shift ends; units still in flight
            # drain afterwards without counting
            self.finished = True
            self.report = self.collect_results()
            logging.info(
                f"Total Products Completed: {self.report.completed_count}, "
                f"Total Simulation Time: {self.report.elapsed_time:.2f}"
            )

    # ------------------------------
    # Flow Between Stages
    # ------------------------------
    def feed_backlog(self):
        if not self.backlog:
            logging.debug("Backlog empty, nothing to feed")
            return
        product_kind = self.backlog.popleft()
        # a rejected item is discarded, not requeued
        self._offer(0, product_kind)

    def advance_stage(self, stage_index: int, product_kind: str):
        self._offer(stage_index, product_kind)

    def on_final_complete(self, product_kind: str):
        self.completed_count += 1
        now = self.scheduler.get_current_time()
        logging.info(f"{product_kind} finished at time {now:.2f}")
        if now < self.shift_end_time:
            self.feed_backlog()

    def _offer(self, stage_index: int, product_kind: str):
        if not self.stages[stage_index].start_processing(product_kind, self.shift_end_time):
            self.rejected_by_stage[stage_index] += 1
            logging.info(f"{product_kind} dropped at {self.stages[stage_index].name}")

    def _handle_stage_event(self, event: Event):
        transition: StageTransition = event.payload
        done = self.stages[transition.stage_index].handle_event(event)
        if done is None:
            return
        next_index = done.stage_index + 1
        if next_index < len(self.stages):
            self.advance_stage(next_index, done.product_kind)
        else:
            self.on_final_complete(done.product_kind)

    # ------------------------------
    # Results Collection
    # ------------------------------
    @property
    def dropped_count(self) -> int:
        return sum(self.rejected_by_stage) + sum(stage.abandoned for stage in self.stages)

    def collect_results(self) -> SimulationReport:
        elapsed = self.scheduler.get_current_time()
        return SimulationReport(
            completed_count=self.completed_count,
            elapsed_time=elapsed,
            shifts_run=self.current_shift,
            dropped_count=self.dropped_count,
            backlog_remaining=len(self.backlog),
            throughput_per_hour=throughput_per_hour(self.completed_count, elapsed),
            stages=[
                StageReport(
                    name=stage.name,
                    started=stage.started,
                    completed=stage.completed,
                    breakdowns=stage.breakdowns,
                    rejected=self.rejected_by_stage[stage.index],
                    abandoned=stage.abandoned,
                    utilization=stage_utilization(stage.busy_hours, elapsed),
                )
                for stage in self.stages
            ],
        )
