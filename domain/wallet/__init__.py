"""Wallet domain exports."""
from .allocator import WalletAllocator
from .repository import WalletRepository

__all__ = ["WalletAllocator", "WalletRepository"]
