import itertools

import pytest

from lineshift.api.schemas import SimulationConfig, StageSpec


def quick_stage(name, proc=0.5, setup=0.25, failure_probability=0.0, repair_duration=1.0, kinds=("ProductA",)):
    return StageSpec(
        name=name,
        processing_time={k: proc for k in kinds},
        setup_time={k: setup for k in kinds},
        failure_probability=failure_probability,
        repair_duration=repair_duration,
    )


@pytest.fixture
def quick_line():
    """Five reliable stages, 0.75h each, ProductA only."""
    return [quick_stage(n) for n in ("Intake", "Machining", "Assembly", "Inspection", "Packaging")]


@pytest.fixture
def never_fail():
    def factory(n):
        return [lambda: 0.5 for _ in range(n)]
    return factory


@pytest.fixture
def make_config(quick_line):
    def factory(**overrides):
        params = dict(
            shift_length_hours=8,
            total_shifts=1,
            product_kinds=["ProductA"],
            backlog_repetitions=2,
            stages=quick_line,
        )
        params.update(overrides)
        return SimulationConfig(**params)
    return factory


@pytest.fixture
def always_break():
    return lambda: itertools.repeat(0.0).__next__
