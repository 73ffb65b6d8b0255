"""
Version information for Lotus Bookmarks
"""

__app_name__ = "Lotus Bookmarks"
__version__ = "1.0.0"
__build_date__ = "2026-10-19"
