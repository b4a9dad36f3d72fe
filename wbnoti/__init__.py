"""
Package: wbnoti

World Boss spawn alarms for Discord. The spawn table is generated from a fixed
rotation; subscribers are reminded a configurable number of minutes before
each spawn.
"""
__version__ = "0.1.0"
