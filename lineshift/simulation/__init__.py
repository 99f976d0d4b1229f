# lineshift/simulation/__init__.py
from .event import Event, EventType, StageTransition, make_event
from .scheduler import EventScheduler
from .stage import Stage
from .pipeline import ManufacturingSystem
