"""
Version-control abstraction for gitup.

Every effect gitup has on a repository goes through a VersionControl:
- GitCli: runs the git executable in a subprocess
"""
