from .activity_log import ActivityLog

__all__ = ["ActivityLog"]
