"""
Settings package.

- base.py: LicenseSettings, built from defaults, environment and CLI flags
- logging.py: Logging configuration for each environment
"""
from LicenseTool.settings.base import LicenseSettings

__all__ = ["LicenseSettings"]
