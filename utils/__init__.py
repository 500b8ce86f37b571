"""
Utility modules
"""

from .trace_parser import TraceParser, TraceFormatError
from .visualization import Visualizer

__all__ = ['TraceParser', 'TraceFormatError', 'Visualizer']
