from .main_thread import MainThreadDispatcher

__all__ = ["MainThreadDispatcher"]
