"""
gitup - keep a tree of git repositories committed and in sync with their remotes.
"""

__version__ = "0.3.0"
