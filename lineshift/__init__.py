# lineshift/__init__.py
from .api import SimulationConfig, StageSpec, SimulationReport, StageReport
from .simulation import ManufacturingSystem, EventScheduler, Stage, Event, EventType
