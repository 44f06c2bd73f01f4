"""Transcode orchestrator: one job and preset model over several cloud encoding providers."""

__version__ = "1.0.0"
