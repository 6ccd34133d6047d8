"""Database module"""
from sequence_timer.db.session import (
    create_db_engine,
    create_session_factory,
    get_db,
    get_pool_stats,
    init_models,
    to_async_url,
)

__all__ = [
    "create_db_engine",
    "create_session_factory",
    "get_db",
    "get_pool_stats",
    "init_models",
    "to_async_url",
]
