"""Error types shared by providers, stores and the service layer."""

from __future__ import annotations

from typing import Any, Mapping


class TranscodeOrchestratorError(Exception):
    """Base error for the transcode orchestrator."""

    def __init__(self, message: str, cause: BaseException | None = None):
        super().__init__(message)
        self.message = message
        self.cause = cause


class ConfigurationError(TranscodeOrchestratorError):
    """Provider configuration is missing or invalid."""


class NotFoundError(TranscodeOrchestratorError):
    """A preset, job or provider does not exist."""


class PresetNotFoundError(NotFoundError):
    """The preset has no summary or no mapping for the provider."""

    def __init__(self, name: str = "", cause: Exception | None = None):
        super().__init__(f"preset not found: {name}" if name else "preset not found", cause)
        self.name = name


class JobNotFoundError(NotFoundError):
    """No job is registered under the given ID."""

    def __init__(self, job_id: str, cause: Exception | None = None):
        super().__init__(f"job not found: {job_id}", cause)
        self.job_id = job_id


class ProviderNotFoundError(NotFoundError):
    """No provider factory is registered under the given name."""

    def __init__(self, name: str):
        super().__init__(f"provider not found: {name}")
        self.name = name


class ConflictError(TranscodeOrchestratorError):
    """The resource already exists."""


class PresetAlreadyExistsError(ConflictError):
    """A preset summary with the same name is already stored."""

    def __init__(self, name: str, cause: Exception | None = None):
        super().__init__(f"preset already exists: {name}", cause)
        self.name = name


class UnsupportedContainerError(TranscodeOrchestratorError):
    """The provider cannot produce the requested container."""

    def __init__(self, container: str, provider_name: str):
        super().__init__(f"container {container!r} is not supported by {provider_name}")
        self.container = container
        self.provider_name = provider_name


class UnsupportedCodecError(TranscodeOrchestratorError):
    """The provider cannot encode with the requested codec."""

    def __init__(self, codec: str, provider_name: str):
        super().__init__(f"codec {codec!r} is not supported by {provider_name}")
        self.codec = codec
        self.provider_name = provider_name


class StoreError(TranscodeOrchestratorError):
    """The local summary/job store failed."""


class RemoteTransportError(TranscodeOrchestratorError):
    """A call against a provider API failed.

    The message is prefixed with the operation being attempted, e.g.
    ``"creating the video config: 502 Bad Gateway"``.
    """

    def __init__(self, operation: str, cause: Exception | str | None = None):
        detail = str(cause) if cause is not None else "unknown error"
        super().__init__(
            f"{operation}: {detail}",
            cause if isinstance(cause, Exception) else None,
        )
        self.operation = operation


class PaginationError(RemoteTransportError):
    """A paged listing stopped making progress before reaching its total."""


class ProviderUnhealthyError(RemoteTransportError):
    """The provider reported itself as degraded."""

    def __init__(self, message: str):
        TranscodeOrchestratorError.__init__(self, message)
        self.operation = "checking provider health"


class InconsistencyError(TranscodeOrchestratorError):
    """Local and remote state diverged after a partially completed operation.

    Raised when the remote mutation succeeded but the matching local mutation
    did not. ``remote_ids`` names the remote resources an operator has to
    reconcile by hand.
    """

    def __init__(
        self,
        operation: str,
        remote_ids: Mapping[str, Any] | None = None,
        cause: BaseException | None = None,
    ):
        ids = dict(remote_ids or {})
        detail = f" (remote: {ids})" if ids else ""
        reason = f": {str(cause) or type(cause).__name__}" if cause is not None else ""
        super().__init__(f"inconsistent state after {operation}{detail}{reason}", cause)
        self.operation = operation
        self.remote_ids = ids
