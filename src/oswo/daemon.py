"""
Hotplug daemon.

Waits for output change notifications and re-applies the best matching
profile. Processing is strictly sequential: one reconciliation pass runs
to completion before the next notification is read.

The last observed snapshot is only used to drop notifications that did
not change anything. It is replaced after a successful pass and kept
when no profile matched, so that returning to a known set of outputs is
still detected.
"""

import logging
from dataclasses import dataclass
from typing import Callable, Mapping, Optional, Tuple

from .applicator import LayoutApplicator
from .config import Profile
from .exceptions import PlanError, TransportError, TransportFatalError
from .outputs import MonitorSnapshot, connected_identities
from .planner import plan
from .selector import select_profile
from .transport import Transport, snapshot

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DaemonState:
    """Last observed outputs, owned by the reconciliation loop."""
    last: Tuple[MonitorSnapshot, ...] = ()


class ChangeMonitor:
    """Drives selection, planning and application on output changes."""

    def __init__(
        self,
        store: Mapping[str, Profile],
        transport: Transport,
        applicator: Optional[LayoutApplicator] = None,
    ) -> None:
        self.store = store
        self.transport = transport
        self.applicator = applicator or LayoutApplicator(transport)

    def seed(self) -> DaemonState:
        return DaemonState(last=snapshot(self.transport))

    def reconcile(self, state: DaemonState) -> DaemonState:
        """
        Run one reconciliation pass.

        Args:
            state: State after the previous pass

        Returns:
            The new state; ``state`` itself when nothing was applied
        """
        try:
            outputs = snapshot(self.transport)
        except TransportFatalError:
            raise
        except TransportError as e:
            logger.error(f"Failed to query outputs: {e}")
            return state

        if outputs == state.last:
            logger.debug("No output changes")
            return state

        identities = connected_identities(outputs)
        logger.debug(f"Connected outputs: {sorted(identities)}")

        name = select_profile(identities, self.store)
        if name is None:
            logger.info("No matching profile for connected outputs")
            return state

        logger.info(f"Activating profile '{name}'")
        try:
            self.applicator.apply(plan(outputs, self.store[name].outputs))
        except TransportFatalError:
            raise
        except (PlanError, TransportError) as e:
            logger.error(f"Failed to apply profile '{name}': {e}")
            return state

        return DaemonState(last=outputs)

    def run(self) -> None:
        """
        Reconcile on every output event until the subscription breaks.

        Raises:
            TransportFatalError: When the event stream fails
        """
        logger.info("Subscribing to output changes")
        events = self.transport.subscribe_output_events()
        state = self.seed()
        for event in events:
            logger.debug(f"Output event: {event}")
            state = self.reconcile(state)
        raise TransportFatalError("Output event stream ended")


def reconcile_forever(
    store: Mapping[str, Profile],
    transport: Transport,
    echo: Optional[Callable[[str], None]] = None,
) -> None:
    """Run the hotplug daemon; returns only by raising TransportFatalError."""
    monitor = ChangeMonitor(store, transport, LayoutApplicator(transport, echo=echo))
    monitor.run()
