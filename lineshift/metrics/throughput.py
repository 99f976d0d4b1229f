# lineshift/metrics/throughput.py


def throughput_per_hour(completed: int, elapsed_hours: float) -> float:
    """
    Finished units per virtual hour.

    Args:
        completed: units that left the last stage
        elapsed_hours: total virtual time of the run
    Returns:
        Rate, or 0.0 for a run that never advanced the clock
    """
    if elapsed_hours <= 0:
        return 0.0
    return completed / elapsed_hours


def stage_utilization(busy_hours: float, elapsed_hours: float) -> float:
    """
    Share of the run a stage spent occupied (working or under repair).

    Busy time booked for work that runs past the end of the simulation is
    clipped, so the result stays in [0, 1].
    """
    if elapsed_hours <= 0:
        return 0.0
    return max(0.0, min(1.0, busy_hours / elapsed_hours))
