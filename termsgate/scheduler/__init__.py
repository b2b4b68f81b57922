"""
Scheduler binding: trigger registration, autostart entry and the
single-instance guard for prompt agents.
"""

from termsgate.scheduler.instance import single_instance
from termsgate.scheduler.manager import ScheduleManager

__all__ = [
    'ScheduleManager',
    'single_instance',
]
