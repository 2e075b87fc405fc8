"""
Profile selection.

A profile is a candidate when every identity it references is connected.
The candidate referencing the most outputs wins; equally specific
candidates are ordered by profile name so the choice never depends on
config file order.

Profiles are identified by their key in the store.
"""

import logging
from typing import Iterable, List, Mapping, Optional

from .config import Profile

logger = logging.getLogger(__name__)


def candidate_profiles(connected: Iterable[str], store: Mapping[str, Profile]) -> List[str]:
    """
    All profiles that fit the connected identities, best first.

    Args:
        connected: Identities of the connected outputs
        store: Profile name -> Profile

    Returns:
        Store keys of the candidates, sorted by descending output count,
        then by name
    """
    connected_set = frozenset(connected)
    candidates = [
        name for name, profile in store.items()
        if profile.identities <= connected_set
    ]
    candidates.sort(key=lambda name: (-len(store[name]), name))
    return candidates


def select_profile(connected: Iterable[str], store: Mapping[str, Profile]) -> Optional[str]:
    """
    Pick the best profile for the connected identities.

    Returns:
        Store key of the winning profile, or None when nothing fits
    """
    connected_set = frozenset(connected)
    candidates = candidate_profiles(connected_set, store)
    logger.debug(
        f"Connected identities: {sorted(connected_set)}; candidates: {candidates}"
    )
    if not candidates:
        return None
    return candidates[0]
