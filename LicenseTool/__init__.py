"""
License tool project package.

Settings, logging configuration and the command-line entry point.
"""

__version__ = "1.0.0"
