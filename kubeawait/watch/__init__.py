"""Watch package for kubeawait.

Submodules
----------
backoff      -- ExponentialBackoff: jittered, capped retry delays with a reset timer.
subscription -- ResourceSubscription: list-then-watch stream for one named object.
loop         -- watch_until_match / await_state: match events against the filter.
"""

from kubeawait.watch.backoff import ExponentialBackoff
from kubeawait.watch.loop import await_state, watch_until_match
from kubeawait.watch.subscription import ResourceSubscription

__all__ = ["ExponentialBackoff", "ResourceSubscription", "await_state", "watch_until_match"]
