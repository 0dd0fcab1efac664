from .activity_log import record_activity

__all__ = ["record_activity"]
