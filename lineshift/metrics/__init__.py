# lineshift/metrics/__init__.py
from .throughput import throughput_per_hour, stage_utilization
