"""encoding.com provider module."""

from .client import APIStatus, EncodingComClient
from .provider import NAME, EncodingComProvider, encodingcom_factory

__all__ = [
    "APIStatus",
    "EncodingComClient",
    "EncodingComProvider",
    "NAME",
    "encodingcom_factory",
]
