"""
Configuration dataclasses for oswo.
"""

import math
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Dict, FrozenSet, Iterator, List, Optional, Tuple

from ..exceptions import ConfigValidationError


DEFAULT_SCALE = 1.0


@dataclass(frozen=True)
class DesiredOutput:
    """
    One entry of a stored profile.

    The config file accepts either a bare identity string (implicit scale)
    or a table with an explicit scale; both normalize to this shape.
    """
    identity: str
    scale: Optional[float] = None

    def __post_init__(self) -> None:
        if not isinstance(self.identity, str) or not self.identity.strip():
            raise ConfigValidationError("Output identity must be a non-empty string")
        if self.scale is not None and (not math.isfinite(self.scale) or self.scale <= 0):
            raise ConfigValidationError(
                f"Scale for '{self.identity}' must be a positive number, got {self.scale}"
            )

    @property
    def effective_scale(self) -> float:
        return self.scale if self.scale is not None else DEFAULT_SCALE

    @classmethod
    def from_config(cls, data: Any) -> 'DesiredOutput':
        """Parse from config (string or dict)."""
        if isinstance(data, str):
            return cls(identity=data)
        elif isinstance(data, dict):
            unknown = set(data) - {"identity", "name", "scale"}
            if unknown:
                raise ConfigValidationError(
                    f"Unknown key(s) {sorted(unknown)} in output entry {data}. "
                    "Valid keys: ['identity', 'name', 'scale']"
                )
            # 'name' is an alias of 'identity'
            if "identity" in data and "name" in data:
                raise ConfigValidationError(
                    f"Output entry {data} sets both 'identity' and 'name'; use one"
                )
            identity = data.get("identity", data.get("name"))
            if identity is None:
                raise ConfigValidationError(f"Output entry {data} is missing 'identity'")
            scale = data.get("scale")
            if scale is not None and (isinstance(scale, bool) or not isinstance(scale, (int, float))):
                raise ConfigValidationError(
                    f"Scale for '{identity}' must be a number, got {type(scale).__name__}"
                )
            return cls(
                identity=identity,
                scale=float(scale) if scale is not None else None,
            )
        raise ConfigValidationError(f"Invalid output entry: {data!r}")

    def to_config(self) -> Any:
        """Inverse of from_config, using the short form when possible."""
        if self.scale is None:
            return self.identity
        return {"identity": self.identity, "scale": self.scale}

    def __str__(self) -> str:
        return f"{self.identity} (scale: {self.effective_scale:g})"


@dataclass(frozen=True)
class Profile:
    """
    Named, ordered list of desired outputs.

    Order is the left-to-right tiling order.
    """
    name: str
    outputs: Tuple[DesiredOutput, ...] = ()

    def __post_init__(self) -> None:
        seen = set()
        for output in self.outputs:
            if output.identity in seen:
                raise ConfigValidationError(
                    f"Identity '{output.identity}' appears more than once in profile '{self.name}'"
                )
            seen.add(output.identity)

    def __len__(self) -> int:
        return len(self.outputs)

    @property
    def identities(self) -> FrozenSet[str]:
        return frozenset(o.identity for o in self.outputs)

    @classmethod
    def from_config(cls, name: str, data: Any) -> 'Profile':
        """Parse a [profiles.{name}] table."""
        if not isinstance(data, dict):
            raise ConfigValidationError(f"Profile '{name}' must be a table")
        unknown = set(data) - {"outputs"}
        if unknown:
            raise ConfigValidationError(
                f"Unknown key(s) {sorted(unknown)} in profile '{name}'. Valid keys: ['outputs']"
            )
        entries = data.get("outputs")
        if not isinstance(entries, list):
            raise ConfigValidationError(
                f"Profile '{name}' needs an 'outputs' list, e.g. outputs = [\"Dell Inc. DELL U2720Q\"]"
            )
        try:
            outputs = tuple(DesiredOutput.from_config(e) for e in entries)
        except ConfigValidationError as e:
            raise ConfigValidationError(f"Profile '{name}': {e}") from e
        return cls(name=name, outputs=outputs)

    def to_config(self) -> Dict[str, Any]:
        return {"outputs": [o.to_config() for o in self.outputs]}

    def __str__(self) -> str:
        lines = "\n  ".join(str(o) for o in self.outputs)
        return f"{self.name}:\n  {lines}" if lines else f"{self.name}: (no outputs)"


class ProfileStore(Mapping):
    """Read-only mapping from profile name to Profile."""

    def __init__(self, profiles: Optional[Dict[str, Profile]] = None) -> None:
        self._profiles: Dict[str, Profile] = dict(profiles or {})

    def __getitem__(self, name: str) -> Profile:
        return self._profiles[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._profiles)

    def __len__(self) -> int:
        return len(self._profiles)

    def __repr__(self) -> str:
        return f"ProfileStore({sorted(self._profiles)})"

    def find(self, name: str) -> Optional[Profile]:
        return self._profiles.get(name)

    def names(self) -> List[str]:
        return sorted(self._profiles)

    @classmethod
    def from_dict(cls, profiles_dict: Dict[str, Any]) -> 'ProfileStore':
        """Parse the [profiles] section."""
        return cls({
            name: Profile.from_config(name, data)
            for name, data in profiles_dict.items()
        })


@dataclass
class LoggingConfig:
    """Logging configuration."""
    level: str = "INFO"


@dataclass
class SwayConfig:
    """How to reach the compositor."""
    swaymsg: str = "swaymsg"
    socket: Optional[str] = None  # Falls back to $SWAYSOCK
    timeout: int = 10

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"swaymsg": self.swaymsg, "timeout": self.timeout}
        if self.socket:
            data["socket"] = self.socket
        return data


@dataclass
class DaemonConfig:
    """Settings for the hotplug daemon."""
    echo: bool = False  # Echo issued commands to stdout as well as the log
