"""
Core package containing configuration, database, security, and logging.
"""
from order_sync.core.config import Settings, get_settings, settings
from order_sync.core.database import Base, DbSession, get_db_session
from order_sync.core.logging import configure_logging, get_logger
from order_sync.core.security import compute_signature, verify_gateway_signature

__all__ = [
    "Settings",
    "settings",
    "get_settings",
    "Base",
    "DbSession",
    "get_db_session",
    "configure_logging",
    "get_logger",
    "compute_signature",
    "verify_gateway_signature",
]
