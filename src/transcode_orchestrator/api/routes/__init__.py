"""API route modules."""

from . import jobs, presets, providers

__all__ = ["jobs", "presets", "providers"]
