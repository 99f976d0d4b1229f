# lineshift/api/__init__.py
from .schemas import SimulationConfig, StageSpec, StageReport, SimulationReport, default_stages
