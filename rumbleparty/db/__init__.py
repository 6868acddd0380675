from .engine import DEFAULT_SQLITE_URL, get_sessionmaker, make_engine

__all__ = ["DEFAULT_SQLITE_URL", "get_sessionmaker", "make_engine"]
