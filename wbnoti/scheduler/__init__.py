"""
Package: wbnoti/scheduler

Provides alarm evaluation, NotificationTask, and NotificationScheduler classes.
"""
from .alarm import AlarmDecision, AlarmState, evaluate_alarm
from .task import NotificationTask
from .manager import NotificationScheduler
