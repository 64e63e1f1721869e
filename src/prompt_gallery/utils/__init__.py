"""Utility helpers."""

from .hashing import AnchorAllocator, hash_code

__all__ = [
    "AnchorAllocator",
    "hash_code",
]
