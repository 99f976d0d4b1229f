# lineshift/api/schemas.py

from pydantic import BaseModel, Field, conint, confloat, model_validator
from typing import Dict, List, Optional

# Upper bounds keep a single run to a bounded number of events
MAX_SHIFTS = 1000
MAX_BACKLOG_REPETITIONS = 10_000


# -----------------------------
# 1. Stage Config
# -----------------------------
class StageSpec(BaseModel):
    name: str
    processing_time: Dict[str, confloat(ge=0)] = Field(..., description="Hours of work per product kind")
    setup_time: Dict[str, confloat(ge=0)] = Field(..., description="Changeover hours per product kind")
    failure_probability: confloat(ge=0, le=1) = 0.0
    repair_duration: confloat(ge=0) = Field(0.0, description="Hours lost per breakdown")


def default_stages() -> List[StageSpec]:
    """The five-stage reference line: intake, machining, assembly, inspection, packaging."""
    return [
        StageSpec(
            name="Raw Material Handler",
            processing_time={"ProductA": 2.0, "ProductB": 3.0},
            setup_time={"ProductA": 1.0, "ProductB": 1.5},
            failure_probability=0.1,
            repair_duration=1.0,
        ),
        StageSpec(
            name="Machining",
            processing_time={"ProductA": 3.0, "ProductB": 4.0},
            setup_time={"ProductA": 1.0, "ProductB": 2.0},
            failure_probability=0.1,
            repair_duration=1.5,
        ),
        StageSpec(
            name="Assembly",
            processing_time={"ProductA": 4.0, "ProductB": 5.0},
            setup_time={"ProductA": 1.5, "ProductB": 2.5},
            failure_probability=0.1,
            repair_duration=2.0,
        ),
        StageSpec(
            name="Quality Control",
            processing_time={"ProductA": 1.0, "ProductB": 1.5},
            setup_time={"ProductA": 0.5, "ProductB": 1.0},
            failure_probability=0.05,
            repair_duration=0.5,
        ),
        StageSpec(
            name="Packaging",
            processing_time={"ProductA": 2.0, "ProductB": 2.5},
            setup_time={"ProductA": 0.5, "ProductB": 1.0},
            failure_probability=0.05,
            repair_duration=0.5,
        ),
    ]


# -----------------------------
# 2. Simulation Config (User Input Parameters)
# -----------------------------
class SimulationConfig(BaseModel):
    shift_length_hours: conint(gt=0) = Field(..., description="Length of one shift in virtual hours")
    total_shifts: conint(gt=0, le=MAX_SHIFTS) = Field(..., description="Number of back-to-back shifts to run")

    # Backlog Config
    product_kinds: List[str] = Field(default_factory=lambda: ["ProductA", "ProductB"], min_length=1)
    backlog_repetitions: conint(ge=0, le=MAX_BACKLOG_REPETITIONS) = Field(100, description="Times the product kinds are repeated in the backlog")

    # Line Config
    stages: List[StageSpec] = Field(default_factory=default_stages, min_length=1)
    seed: Optional[int] = Field(None, description="Seed for the per-stage breakdown draws")

    @model_validator(mode="after")
    def check_stage_times(self):
        for stage in self.stages:
            for kind in self.product_kinds:
                if kind not in stage.processing_time or kind not in stage.setup_time:
                    raise ValueError(f"Stage {stage.name!r} has no timing for product kind {kind!r}")
        return self


# -----------------------------
# 3. Report Models
# -----------------------------
class StageReport(BaseModel):
    name: str
    started: int = 0
    completed: int = 0
    breakdowns: int = 0
    rejected: int = 0
    abandoned: int = 0
    utilization: float = 0.0


class SimulationReport(BaseModel):
    completed_count: int
    elapsed_time: float
    shifts_run: int
    dropped_count: int = 0
    backlog_remaining: int = 0
    throughput_per_hour: float = 0.0
    stages: List[StageReport] = Field(default_factory=list)
