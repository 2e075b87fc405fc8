"""
Output snapshots as reported by the compositor.

A snapshot is taken fresh on every query and never mutated. The daemon
compares successive snapshots to tell real hotplug changes from noise.
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, FrozenSet, Iterable, Tuple

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Mode:
    """One supported output mode."""
    width: int
    height: int
    refresh: int = 0  # Millihertz, as reported by sway

    @property
    def area(self) -> int:
        return self.width * self.height

    def __str__(self) -> str:
        return f"{self.width}x{self.height} ({self.refresh / 1000:g} Hz)"


@dataclass(frozen=True)
class MonitorSnapshot:
    """Observed state of one connected output."""
    name: str  # Compositor port name (e.g., "DP-1", "eDP-1")
    identity: str  # Make + model, matched against profiles
    position: Tuple[int, int] = (0, 0)
    resolution: Tuple[int, int] = (0, 0)
    scale: float = 1.0
    active: bool = False
    modes: Tuple[Mode, ...] = ()

    def __repr__(self) -> str:
        return f"MonitorSnapshot({self.name}, {self.identity!r})"

    @classmethod
    def from_sway_output(cls, record: Dict[str, Any]) -> 'MonitorSnapshot':
        """
        Build a snapshot from one swaymsg -t get_outputs record.

        Example record:
        {
          "name": "DP-1",
          "make": "Dell Inc.",
          "model": "DELL U2720Q",
          "active": true,
          "scale": 1.5,
          "rect": {"x": 0, "y": 0, "width": 2560, "height": 1440},
          "current_mode": {"width": 3840, "height": 2160, "refresh": 59997},
          "modes": [{"width": 3840, "height": 2160, "refresh": 59997}, ...]
        }
        """
        make = record.get("make") or ""
        model = record.get("model") or ""
        identity = f"{make} {model}".strip()

        rect = record.get("rect") or {}
        position = (int(rect.get("x", 0)), int(rect.get("y", 0)))

        current_mode = record.get("current_mode") or {}
        resolution = (
            int(current_mode.get("width", 0)),
            int(current_mode.get("height", 0)),
        )

        # Disabled outputs report a non-positive scale
        scale = record.get("scale")
        if not isinstance(scale, (int, float)) or scale <= 0:
            scale = 1.0

        modes = tuple(
            Mode(
                width=int(m.get("width", 0)),
                height=int(m.get("height", 0)),
                refresh=int(m.get("refresh", 0)),
            )
            for m in record.get("modes") or []
        )

        return cls(
            name=record.get("name", ""),
            identity=identity,
            position=position,
            resolution=resolution,
            scale=float(scale),
            active=bool(record.get("active", False)),
            modes=modes,
        )

    def display(self, verbose: bool = False, name_pad: int = 0) -> str:
        """Render one line of the layout view."""
        # At least one space after the colon
        pad = " " * (max(name_pad - len(self.name), 0) + 1)
        state = "enabled" if self.active else "disabled"
        resolution = f"{self.resolution[0]}x{self.resolution[1]}"
        line = (
            f"{self.name}:{pad}{state:<8} position: {self.position[0]:4}/{self.position[1]}, "
            f"resolution: {resolution:>9}, scale: {self.scale:g}, model: {self.identity}"
        )
        if verbose:
            line += ", modes: " + ", ".join(str(m) for m in self.modes)
        return line


def snapshots_from_sway(records: Iterable[Dict[str, Any]]) -> Tuple[MonitorSnapshot, ...]:
    """Convert get_outputs records, keeping compositor order."""
    snapshots = []
    for record in records:
        if not record.get("name"):
            logger.debug(f"Skipping output record without name: {record}")
            continue
        snapshots.append(MonitorSnapshot.from_sway_output(record))
    return tuple(snapshots)


def connected_identities(snapshots: Iterable[MonitorSnapshot]) -> FrozenSet[str]:
    """Identities of all connected outputs."""
    return frozenset(s.identity for s in snapshots)


def longest_name(snapshots: Iterable[MonitorSnapshot]) -> int:
    return max((len(s.name) for s in snapshots), default=0)
