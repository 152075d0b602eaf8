# SplitPicker Services Package
"""
Backend services for SplitPicker.

Services handle application enumeration, icon lookup and change
notification.
"""

from .applications import ApplicationDescriptor, ApplicationsService, get_applications, get_applications_service
from .icons import IconSearchPlan, IconThemeResolver, find_icon
from .notifier import EventNotifier

__all__ = [
    "ApplicationDescriptor",
    "ApplicationsService",
    "EventNotifier",
    "IconSearchPlan",
    "IconThemeResolver",
    "find_icon",
    "get_applications",
    "get_applications_service",
]
