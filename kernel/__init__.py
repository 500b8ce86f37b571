"""
Core modules for the CPU scheduling kernel
"""

from .job import Job, JobState
from .ordered_queue import OrderedQueue
from .stats import StatsAccumulator
from .dispatcher import Dispatcher, SchedulerError

__all__ = [
    'Job',
    'JobState',
    'OrderedQueue',
    'StatsAccumulator',
    'Dispatcher',
    'SchedulerError'
]
