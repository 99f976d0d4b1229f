# lineshift/simulation/event.py

from enum import Enum
from pydantic import BaseModel, ConfigDict, confloat
from typing import Optional, Tuple
import itertools


class EventType(str, Enum):
    SHIFT_START = "shift_start"
    SHIFT_END = "shift_end"
    STAGE_COMPLETE = "stage_complete"
    STAGE_REPAIRED = "stage_repaired"


class StageTransition(BaseModel):
    """Which unit a stage is working on and the deadline it was accepted under."""

    model_config = ConfigDict(frozen=True)

    stage_index: int
    product_kind: str
    deadline: float


class Event(BaseModel):
    model_config = ConfigDict(frozen=True)

    time: confloat(ge=0)
    type: EventType
    payload: Optional[StageTransition] = None


# Unique sequence number for tie-breaking
_counter_gen = itertools.count()


def make_event(time: float, type: EventType, payload: Optional[StageTransition] = None) -> Tuple[float, int, Event]:
    return (time, next(_counter_gen), Event(time=time, type=type, payload=payload))
