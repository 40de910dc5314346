"""Cart domain exports."""
from .entity import CartLine, CartSnapshot, CartSnapshotLine
from .repository import CartRepository

__all__ = ["CartLine", "CartSnapshot", "CartSnapshotLine", "CartRepository"]
