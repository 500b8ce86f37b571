"""
Event-driven simulation driver
"""

from .engine import (Simulator, JobSpec, JobResult, GanttEntry,
                     run_simulation, validate_jobs, DEFAULT_CORES, DEFAULT_QUANTUM)

__all__ = [
    'Simulator',
    'JobSpec',
    'JobResult',
    'GanttEntry',
    'run_simulation',
    'validate_jobs',
    'DEFAULT_CORES',
    'DEFAULT_QUANTUM'
]
