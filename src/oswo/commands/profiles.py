"""Profile listing and saving commands."""

import logging
from pathlib import Path
from typing import Optional

from ..config import DEFAULT_SCALE, Config, DesiredOutput, Profile
from ..exceptions import ConfigError, ConfigValidationError, TransportError
from ..outputs import connected_identities
from ..selector import candidate_profiles
from ..transport import Transport, snapshot

logger = logging.getLogger(__name__)


def list_profiles(config: Config, transport: Optional[Transport] = None) -> None:
    """
    Print every stored profile.

    With a transport, profiles fitting the connected outputs are marked
    with '+' and the one that would be activated with '*'.
    """
    if not config.profiles:
        print(f"No profiles configured in {config.source}")
        return

    candidates = []
    if transport is not None:
        try:
            identities = connected_identities(snapshot(transport))
            candidates = candidate_profiles(identities, config.profiles)
        except TransportError as e:
            logger.warning(f"Cannot query connected outputs, listing without matches: {e}")

    for name in config.profiles.names():
        if candidates and name == candidates[0]:
            marker = "*"
        elif name in candidates:
            marker = "+"
        else:
            marker = " "
        print(f"{marker} {config.profiles[name]}")


def save_profile(
    config: Config,
    transport: Transport,
    name: str,
    config_file: Optional[Path] = None,
    force: bool = False,
) -> Path:
    """
    Store the enabled outputs as a profile.

    Outputs are ordered left to right by their current position; scales
    other than the default are recorded explicitly.

    Returns:
        Path of the written config file
    """
    if name in config.profiles and not force:
        raise ConfigError(f"Profile '{name}' already exists. Use --force to replace it.")

    enabled = sorted(
        (m for m in snapshot(transport) if m.active),
        key=lambda m: (m.position[0], m.position[1]),
    )
    if not enabled:
        raise ConfigValidationError("No enabled outputs to save")

    profile = Profile(
        name=name,
        outputs=tuple(
            DesiredOutput(
                identity=m.identity,
                scale=None if m.scale == DEFAULT_SCALE else m.scale,
            )
            for m in enabled
        ),
    )
    path = config.with_profile(profile).save(config_file)
    print(f"Saved profile '{name}' to {path}")
    print(f"  {profile}")
    return path
