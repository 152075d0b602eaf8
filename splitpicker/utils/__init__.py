# SplitPicker Utilities Package
"""
Shared utility functions and helpers for SplitPicker.
"""

from .helpers import detect_locale, load_settings, locale_fallbacks
from .launch import format_exec, launch_application

__all__ = ["detect_locale", "format_exec", "launch_application", "load_settings", "locale_fallbacks"]
