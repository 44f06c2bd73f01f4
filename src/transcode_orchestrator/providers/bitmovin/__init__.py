"""Bitmovin provider module."""

from .client import BitmovinAPIError, BitmovinClient
from .provider import NAME, BitmovinProvider, bitmovin_factory

__all__ = [
    "BitmovinAPIError",
    "BitmovinClient",
    "BitmovinProvider",
    "NAME",
    "bitmovin_factory",
]
