"""Layout activation commands: set, use, auto and daemon."""

import logging
from typing import List

from ..applicator import LayoutApplicator
from ..config import Config
from ..daemon import reconcile_forever
from ..layout import activate_best, activate_manual, activate_profile
from ..transport import Transport, snapshot

logger = logging.getLogger(__name__)


def set_outputs(transport: Transport, names: List[str]) -> None:
    """Enable the named outputs left to right, disable the others."""
    applicator = LayoutApplicator(transport, echo=print)
    activate_manual(snapshot(transport), names, applicator)


def use_profile(config: Config, transport: Transport, name: str) -> None:
    """Apply a stored profile by name."""
    applicator = LayoutApplicator(transport, echo=print)
    activate_profile(config.profiles, name, snapshot(transport), applicator)


def auto_profile(config: Config, transport: Transport) -> None:
    """Apply the best matching profile once."""
    applicator = LayoutApplicator(transport, echo=print)
    name, _ = activate_best(config.profiles, snapshot(transport), applicator)
    print(f"Activated profile '{name}'")


def run_daemon(config: Config, transport: Transport) -> None:
    """
    Re-apply the best profile on every output change.

    Blocks until the compositor connection breaks.
    """
    if not config.profiles:
        logger.warning(f"No profiles configured in {config.source}; the daemon will never change outputs")
    else:
        logger.info(f"Watching outputs with profiles: {', '.join(config.profiles.names())}")

    echo = print if config.daemon.echo else None
    reconcile_forever(config.profiles, transport, echo=echo)
