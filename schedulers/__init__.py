"""
CPU Scheduling Schemes
"""

from .schemes import (SchedulingScheme, SCHEME_DESCRIPTIONS,
                      fcfs_compare, rr_compare, sjf_compare, pri_compare)

__all__ = [
    'SchedulingScheme',
    'SCHEME_DESCRIPTIONS',
    'fcfs_compare',
    'rr_compare',
    'sjf_compare',
    'pri_compare'
]
