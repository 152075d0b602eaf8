"""
Search package - Narrow the application list as the user types.
"""

from .app_search import AppSearch

__all__ = ["AppSearch"]
