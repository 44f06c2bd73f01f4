"""HTTP API for the transcode orchestrator."""
