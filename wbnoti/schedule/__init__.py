"""
Package: wbnoti/schedule

Provides the spawn table generator and the ScheduleCursor over it.
"""
from .generator import Occurrence, generate_schedule, in_spawn_window, snap_to_window
from .cursor import ScheduleCursor
