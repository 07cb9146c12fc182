from .pr_tracker import PRTracker
from .progress_series import ProgressSeries
from .calendar_index import CalendarIndex, CalendarDay

__all__ = ["PRTracker", "ProgressSeries", "CalendarIndex", "CalendarDay"]
