from .pool import ConnectionPool

__all__ = ["ConnectionPool"]
