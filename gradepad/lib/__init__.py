__all__ = [
    "NotReady",
]

from .sentinel import NotReady
