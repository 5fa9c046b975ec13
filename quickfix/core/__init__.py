"""
Core package initializer.

This package provides core utilities such as token handling and
rate limiting.
"""

from .security import (
    create_access_token,
    decode_token,
    hash_token,
    generate_verification_token,
)

__all__ = [
    "create_access_token",
    "decode_token",
    "hash_token",
    "generate_verification_token",
]
