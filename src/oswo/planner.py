"""
Layout planning.

Turns a profile (or a list of output names) plus the connected outputs
into one action per connected output. Planning never talks to the
compositor: every error is raised before a single command is issued.

Enabled outputs are tiled horizontally in request order, each at its best
(largest area) mode, with the top edges aligned at y=0.
"""

import logging
from dataclasses import dataclass
from typing import Iterable, List, Optional, Sequence, Tuple, Union

from .config import DesiredOutput
from .exceptions import NoMatchingOutputsError, UnresolvedIdentityError
from .outputs import Mode, MonitorSnapshot

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EnableOutput:
    """Enable an output at a position, resolution and scale."""
    name: str
    position: Tuple[int, int]
    resolution: Tuple[int, int]
    scale: float = 1.0

    def to_command(self) -> str:
        x, y = self.position
        width, height = self.resolution
        return (
            f"output {self.name} enable position {x} {y} "
            f"resolution {width}x{height} scale {self.scale:g}"
        )


@dataclass(frozen=True)
class DisableOutput:
    """Disable an output."""
    name: str

    def to_command(self) -> str:
        return f"output {self.name} disable"


OutputAction = Union[EnableOutput, DisableOutput]


def best_mode(modes: Iterable[Mode]) -> Optional[Mode]:
    """Largest-area mode; the first one wins a tie."""
    best = None
    for mode in modes:
        if best is None or mode.area > best.area:
            best = mode
    return best


def _tile(resolved: Sequence[Tuple[MonitorSnapshot, float]]) -> List[EnableOutput]:
    """Place outputs left to right starting at the origin."""
    actions = []
    x = 0
    for monitor, scale in resolved:
        mode = best_mode(monitor.modes)
        resolution = (mode.width, mode.height) if mode else (0, 0)
        if mode is None:
            logger.warning(f"Output {monitor.name} reports no modes, requesting 0x0")
        actions.append(EnableOutput(
            name=monitor.name,
            position=(x, 0),
            resolution=resolution,
            scale=scale,
        ))
        x += resolution[0]
    return actions


def _disable_others(
    connected: Sequence[MonitorSnapshot],
    keep: Iterable[MonitorSnapshot],
) -> List[DisableOutput]:
    kept_names = {m.name for m in keep}
    return [DisableOutput(m.name) for m in connected if m.name not in kept_names]


def plan(
    connected: Sequence[MonitorSnapshot],
    desired: Sequence[DesiredOutput],
) -> List[OutputAction]:
    """
    Plan the layout of a profile.

    Each desired identity resolves to the first connected output (in
    compositor order) with exactly that identity. Connected outputs the
    profile does not reference are disabled.

    Args:
        connected: Current output snapshots
        desired: Profile entries in tiling order

    Returns:
        Disable actions (compositor order) followed by enable actions
        (profile order)

    Raises:
        UnresolvedIdentityError: If an identity is not connected
    """
    resolved: List[Tuple[MonitorSnapshot, float]] = []
    for entry in desired:
        monitor = next((m for m in connected if m.identity == entry.identity), None)
        if monitor is None:
            raise UnresolvedIdentityError(entry.identity)
        resolved.append((monitor, entry.effective_scale))

    disables = _disable_others(connected, (m for m, _ in resolved))
    return [*disables, *_tile(resolved)]


def plan_manual(
    connected: Sequence[MonitorSnapshot],
    requested_names: Sequence[str],
) -> List[OutputAction]:
    """
    Plan the layout for outputs picked by port name.

    Names match case-insensitively. Unknown names are skipped with a
    warning; repeated names count once.

    Raises:
        NoMatchingOutputsError: If none of the names is connected
    """
    by_name = {m.name.lower(): m for m in connected}
    resolved: List[Tuple[MonitorSnapshot, float]] = []
    seen = set()
    for requested in requested_names:
        key = requested.lower()
        if key in seen:
            continue
        seen.add(key)
        monitor = by_name.get(key)
        if monitor is None:
            logger.warning(f"Output {requested} not connected")
            continue
        resolved.append((monitor, monitor.scale))

    if not resolved:
        raise NoMatchingOutputsError(
            f"None of the requested outputs is connected: {', '.join(requested_names) or '(none)'}\n"
            f"Connected outputs: {', '.join(m.name for m in connected) or '(none)'}"
        )

    disables = _disable_others(connected, (m for m, _ in resolved))
    return [*disables, *_tile(resolved)]
