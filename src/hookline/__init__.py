"""
Hookline: hook bus and session lifecycle for pluggable application modules.
"""

__version__ = "1.0.0"
