"""
Entry points used by the CLI: activate a layout or render the current one.

All functions plan before they apply, so planning and profile errors
leave the outputs untouched.
"""

import logging
from typing import List, Mapping, Sequence, Tuple

from .applicator import LayoutApplicator
from .config import Profile
from .exceptions import NoEligibleProfileError, ProfileNotFoundError
from .outputs import MonitorSnapshot, connected_identities, longest_name
from .planner import plan, plan_manual
from .selector import select_profile

logger = logging.getLogger(__name__)


def activate_profile(
    store: Mapping[str, Profile],
    name: str,
    connected: Sequence[MonitorSnapshot],
    applicator: LayoutApplicator,
) -> List[str]:
    """
    Apply a profile chosen by name, skipping selection.

    Raises:
        ProfileNotFoundError: If no profile has this name
        UnresolvedIdentityError: If the profile references a disconnected output
        CommandFailedError: If the compositor rejects a command
    """
    profile = store.get(name)
    if profile is None:
        raise ProfileNotFoundError(name)

    actions = plan(connected, profile.outputs)
    logger.info(f"Activating profile '{name}'")
    return applicator.apply(actions)


def activate_manual(
    connected: Sequence[MonitorSnapshot],
    names: Sequence[str],
    applicator: LayoutApplicator,
) -> List[str]:
    """Enable the named outputs left to right and disable the rest."""
    actions = plan_manual(connected, names)
    return applicator.apply(actions)


def activate_best(
    store: Mapping[str, Profile],
    connected: Sequence[MonitorSnapshot],
    applicator: LayoutApplicator,
) -> Tuple[str, List[str]]:
    """
    Select the best profile for the connected outputs and apply it.

    Returns:
        (profile name, issued commands)

    Raises:
        NoEligibleProfileError: If no profile fits the connected outputs
    """
    identities = connected_identities(connected)
    name = select_profile(identities, store)
    if name is None:
        raise NoEligibleProfileError(
            "No profile matches the connected outputs:\n  "
            + "\n  ".join(sorted(identities) or ["(none)"])
        )
    return name, activate_profile(store, name, connected, applicator)


def current_layout_view(connected: Sequence[MonitorSnapshot], verbose: bool = False) -> str:
    """
    Render the current layout, one output per line.

    Verbose output appends every supported mode.
    """
    name_pad = longest_name(connected)
    return "\n".join(m.display(verbose, name_pad) for m in connected)
