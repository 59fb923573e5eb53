from .bootstrap import bootstrap
from .container import Container, Registration

__all__ = ["Container", "Registration", "bootstrap"]
