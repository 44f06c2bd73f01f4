"""Transcoding providers module."""

from .base import TranscodeProvider
from .configuration import ConfigurationManager
from .registry import ProviderRegistry, build_registry

__all__ = [
    "ConfigurationManager",
    "ProviderRegistry",
    "TranscodeProvider",
    "build_registry",
]
