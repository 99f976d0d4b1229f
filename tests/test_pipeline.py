import pytest

from lineshift.simulation.pipeline import ManufacturingSystem
from conftest import quick_stage


def test_two_units_finish_within_one_shift(make_config, never_fail):
    system = ManufacturingSystem(make_config(), random_sources=never_fail(5))
    report = system.run()

    assert report.completed_count == 2
    assert report.elapsed_time == 8.0
    assert report.shifts_run == 1
    assert report.dropped_count == 0
    assert report.backlog_remaining == 0
    assert system.finished
    assert all(stage.completed == 2 for stage in report.stages)
    assert all(not stage.busy for stage in system.stages)


def test_backlog_exhausted_mid_shift_idles_until_shift_end(make_config, never_fail):
    system = ManufacturingSystem(make_config(backlog_repetitions=1), random_sources=never_fail(5))
    report = system.run()

    assert report.completed_count == 1
    assert report.elapsed_time == 8.0
    assert report.backlog_remaining == 0


def test_unit_running_past_shift_end_is_dropped_not_requeued(make_config, never_fail):
    # third unit enters intake at 7.5 (7.5 + 0.5 == 8.0 is allowed) but cannot
    # enter machining at 8.25
    system = ManufacturingSystem(make_config(backlog_repetitions=3), random_sources=never_fail(5))
    report = system.run()

    assert report.completed_count == 2
    assert report.elapsed_time == 8.0
    assert report.backlog_remaining == 0
    # the drop happens after the last shift ended, so only the live counters see it
    assert report.dropped_count == 0
    assert system.dropped_count == 1
    assert system.rejected_by_stage[1] == 1
    assert system.scheduler.get_current_time() == 8.25


def test_report_is_taken_when_the_last_shift_ends(make_config, never_fail):
    # second unit is accepted at 3.0 (3 + 2 == 5) and finishes at 6.0
    config = make_config(
        shift_length_hours=5,
        stages=[quick_stage("Press", proc=2.0, setup=1.0)],
    )
    system = ManufacturingSystem(config, random_sources=never_fail(1))
    report = system.run()

    assert report.completed_count == 1
    assert report.elapsed_time == 5.0
    assert report == system.report
    assert system.completed_count == 2
    assert system.scheduler.get_current_time() == 6.0


def test_back_to_back_shifts(make_config, never_fail):
    config = make_config(
        shift_length_hours=4,
        total_shifts=2,
        backlog_repetitions=10,
        stages=[quick_stage("Press", proc=1.0, setup=1.0)],
    )
    system = ManufacturingSystem(config, random_sources=never_fail(1))
    report = system.run()

    assert report.shifts_run == 2
    # the fourth unit lands at 8.0, after the shift end event queued before it
    assert report.completed_count == 3
    assert system.completed_count == 4
    assert report.elapsed_time == 8.0
    assert report.backlog_remaining == 6
    assert report.stages[0].utilization == 1.0


def test_breakdown_delays_but_does_not_lose_the_unit(make_config):
    draws = iter([0.1, 0.9])
    config = make_config(
        backlog_repetitions=1,
        stages=[quick_stage("Press", proc=1.0, setup=1.0, failure_probability=0.5, repair_duration=1.0)],
    )
    system = ManufacturingSystem(config, random_sources=[lambda: next(draws)])
    report = system.run()

    assert report.completed_count == 1
    assert report.stages[0].breakdowns == 1
    assert report.dropped_count == 0
    assert report.elapsed_time == 8.0


def test_permanently_broken_stage_gives_up_at_shift_boundary(make_config, always_break):
    config = make_config(
        shift_length_hours=4,
        backlog_repetitions=1,
        stages=[quick_stage("Press", proc=2.0, setup=0.0, failure_probability=1.0, repair_duration=1.0)],
    )
    system = ManufacturingSystem(config, random_sources=[always_break()])
    report = system.run()

    assert report.completed_count == 0
    assert report.stages[0].breakdowns == 3
    assert report.stages[0].abandoned == 1
    assert report.dropped_count == 1
    assert report.elapsed_time == 4.0
    assert not system.stages[0].busy


def test_seeded_default_line_is_reproducible():
    from lineshift.api.schemas import SimulationConfig

    config = SimulationConfig(shift_length_hours=24, total_shifts=3, seed=7)
    first = ManufacturingSystem(config).run()
    second = ManufacturingSystem(config).run()

    assert first == second
    assert first.shifts_run == 3
    assert first.elapsed_time == 72.0
    assert first.completed_count + first.dropped_count + first.backlog_remaining <= 200
    assert first.backlog_remaining < 200


def test_default_backlog_alternates_products():
    from lineshift.api.schemas import SimulationConfig

    system = ManufacturingSystem(SimulationConfig(shift_length_hours=8, total_shifts=1))
    assert len(system.backlog) == 200
    assert list(system.backlog)[:4] == ["ProductA", "ProductB", "ProductA", "ProductB"]
    assert [stage.name for stage in system.stages] == [
        "Raw Material Handler", "Machining", "Assembly", "Quality Control", "Packaging",
    ]


def test_random_source_count_must_match_stages(make_config, never_fail):
    with pytest.raises(ValueError):
        ManufacturingSystem(make_config(), random_sources=never_fail(2))


def test_default_line_unit_finishing_after_shift_end_is_not_counted():
    from lineshift.api.schemas import SimulationConfig

    # ProductA enters Packaging at 14.0 (14 + 2 == 16) and finishes at 16.5
    config = SimulationConfig(shift_length_hours=16, total_shifts=1)
    system = ManufacturingSystem(config, random_sources=[lambda: 0.99] * 5)
    report = system.run()

    assert report.completed_count == 0
    assert report.elapsed_time == 16.0
    assert system.completed_count == 1
