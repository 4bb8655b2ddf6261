"""
Configuration package for the hostel front desk.

Contains environment settings, database engine construction and logging
configuration.
"""

from frontdesk.config.settings import settings, get_settings
from frontdesk.config.database import build_engine
from frontdesk.config.logging import setup_logging, get_logger

__all__ = ['settings', 'get_settings', 'build_engine', 'setup_logging', 'get_logger']
