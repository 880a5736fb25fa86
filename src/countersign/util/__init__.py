from . import coro, model

__all__ = ("coro", "model")
