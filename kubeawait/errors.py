"""Error taxonomy for kubeawait.

Every failure the tool can report derives from KubeAwaitError.  The CLI turns
any KubeAwaitError into a one-line diagnostic and a non-zero exit; anything
else is a bug and is allowed to propagate with a traceback.

TransientStreamError is the one exception that never reaches the caller: the
watch subscription catches it, logs it and reconnects with back-off.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from kubeawait.models.resources import ResourceDescriptor, ResourceFilterCriteria


class KubeAwaitError(Exception):
    """Base class for all fatal kubeawait errors."""


class ConfigError(KubeAwaitError):
    """A KUBEAWAIT_* environment variable holds an invalid value."""


class InputError(KubeAwaitError):
    """The state filter could not be read or parsed."""


class ClusterConnectionError(KubeAwaitError):
    """Cluster configuration or API discovery failed."""


class ResourceNotFoundError(KubeAwaitError):
    """No catalog entry satisfies the filtering criteria."""

    def __init__(self, criteria: ResourceFilterCriteria) -> None:
        super().__init__(f"No API resources matching filtering criteria were found ({criteria.describe()})")
        self.criteria = criteria


class AmbiguousResourceError(KubeAwaitError):
    """Two or more catalog entries satisfy the filtering criteria."""

    def __init__(
        self,
        criteria: ResourceFilterCriteria,
        candidates: list[ResourceDescriptor],
    ) -> None:
        listed = ", ".join(f"{c.plural}.{c.api_version}" for c in candidates)
        super().__init__(
            "Multiple resources matching filtering criteria were found, "
            f"try narrowing your filtering criteria ({criteria.describe()}; candidates: {listed})"
        )
        self.criteria = criteria
        self.candidates = candidates


class TransientStreamError(KubeAwaitError):
    """Recoverable watch failure: the subscription relists after back-off."""


class StreamEndedError(KubeAwaitError):
    """The event stream finished without producing a matching state."""

    def __init__(self) -> None:
        super().__init__("Watcher stream finished unexpectedly")


class WatchTimeoutError(KubeAwaitError):
    """The deadline elapsed before the resource reached the desired state."""

    def __init__(self, timeout: float) -> None:
        super().__init__(f"Timeout expired after {timeout:g}s waiting for the resource state to match")
        self.timeout = timeout
