"""
Snippet Board: share code snippets linked to Reddit comment threads.
"""

__version__ = "0.1.0"
