"""Utility functions."""

from yeild.utils.password import hash_password, verify_password

__all__ = [
    "hash_password",
    "verify_password",
]
