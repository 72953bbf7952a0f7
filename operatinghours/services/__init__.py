"""
Service layer helpers that apply domain edits to a whole week.
"""

from .schedule_editor import ChannelReport, ScheduleEditorService, WeekReport

__all__ = ["ChannelReport", "ScheduleEditorService", "WeekReport"]
