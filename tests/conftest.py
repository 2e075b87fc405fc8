"""Test configuration and fixtures."""

import copy
from pathlib import Path
from typing import Any, Dict, Iterator, List, Optional, Sequence, Tuple

import pytest
from pytest_bdd import given, then, parsers

from oswo.config import Config, DesiredOutput, Profile, ProfileStore
from oswo.exceptions import CompositorCommandError, TransportFatalError
from oswo.transport import Transport


def sway_output(
    name: str,
    make: str,
    model: str,
    modes: Sequence[Tuple[int, int]] = ((1920, 1080),),
    active: bool = True,
    position: Tuple[int, int] = (0, 0),
    scale: float = 1.0,
) -> Dict[str, Any]:
    """Build a record shaped like one entry of swaymsg -t get_outputs."""
    mode_dicts = [{"width": w, "height": h, "refresh": 60000} for w, h in modes]
    record: Dict[str, Any] = {
        "name": name,
        "make": make,
        "model": model,
        "active": active,
        "scale": scale if active else -1.0,
        "rect": {"x": position[0], "y": position[1], "width": 0, "height": 0},
        "modes": mode_dicts,
    }
    if active and mode_dicts:
        record["current_mode"] = dict(mode_dicts[0])
    return record


class FakeTransport(Transport):
    """
    In-memory compositor.

    Commands are recorded and applied to the output records so that a
    following list_outputs() sees the new layout, the way sway would.
    """

    def __init__(self, records: Optional[List[Dict[str, Any]]] = None) -> None:
        self.records: List[Dict[str, Any]] = copy.deepcopy(records or [])
        self.commands: List[str] = []
        self.fail_on: Optional[str] = None
        self.events: List[List[Dict[str, Any]]] = []
        self.list_calls = 0
        self.subscribed = False

    def list_outputs(self) -> List[Dict[str, Any]]:
        self.list_calls += 1
        return copy.deepcopy(self.records)

    def run_command(self, command: str) -> None:
        self.commands.append(command)
        if self.fail_on and self.fail_on in command:
            raise CompositorCommandError(f"sway rejected '{command}': simulated failure")

        words = command.split()
        record = next((r for r in self.records if r["name"] == words[1]), None)
        if record is None:
            raise CompositorCommandError(f"sway rejected '{command}': unknown output")

        if words[2] == "disable":
            record["active"] = False
            record["scale"] = -1.0
            record.pop("current_mode", None)
        else:
            width, height = (int(v) for v in words[7].split("x"))
            record["active"] = True
            record["rect"] = {"x": int(words[4]), "y": int(words[5]), "width": width, "height": height}
            record["current_mode"] = {"width": width, "height": height, "refresh": 60000}
            record["scale"] = float(words[9])

    def replug(self, records: List[Dict[str, Any]]) -> None:
        """Queue an output event that replaces the connected outputs."""
        self.events.append(copy.deepcopy(records))

    def subscribe_output_events(self) -> Iterator[Dict[str, Any]]:
        self.subscribed = True
        return self._replay()

    def _replay(self) -> Iterator[Dict[str, Any]]:
        for records in self.events:
            self.records = records
            yield {"change": "unspecified"}
        raise TransportFatalError("Output event stream ended")


# ============================================================================
# Sample hardware
# ============================================================================

LAPTOP = ("eDP-1", "Sharp", "LQ140M1JW46")
DELL = ("DP-1", "Dell Inc.", "DELL U2720Q")
LG = ("HDMI-A-1", "LG Electronics", "LG ULTRAFINE")

LAPTOP_ID = "Sharp LQ140M1JW46"
DELL_ID = "Dell Inc. DELL U2720Q"
LG_ID = "LG Electronics LG ULTRAFINE"


def laptop(**kwargs) -> Dict[str, Any]:
    kwargs.setdefault("modes", [(1920, 1080)])
    return sway_output(*LAPTOP, **kwargs)


def dell(**kwargs) -> Dict[str, Any]:
    kwargs.setdefault("modes", [(2560, 1440), (3840, 2160), (1920, 1080)])
    return sway_output(*DELL, **kwargs)


def lg(**kwargs) -> Dict[str, Any]:
    kwargs.setdefault("modes", [(2560, 1440)])
    return sway_output(*LG, **kwargs)


@pytest.fixture
def fake_transport() -> FakeTransport:
    """Laptop panel plus a Dell monitor."""
    return FakeTransport([laptop(), dell(position=(1920, 0))])


@pytest.fixture
def profile_store() -> ProfileStore:
    return ProfileStore({
        "mobile": Profile("mobile", (DesiredOutput(LAPTOP_ID),)),
        "docked": Profile("docked", (DesiredOutput(DELL_ID, 1.5), DesiredOutput(LAPTOP_ID))),
        "office": Profile("office", (DesiredOutput(LG_ID), DesiredOutput(DELL_ID))),
    })


@pytest.fixture
def config_file(tmp_path: Path) -> Path:
    """A config file with two profiles."""
    path = tmp_path / "oswo.toml"
    path.write_text(f"""
[logging]
level = "WARNING"

[sway]
timeout = 5

[profiles.mobile]
outputs = ["{LAPTOP_ID}"]

[profiles.docked]
outputs = [
    {{ identity = "{DELL_ID}", scale = 1.5 }},
    "{LAPTOP_ID}",
]
""")
    return path


@pytest.fixture
def isolated_env(tmp_path: Path, monkeypatch) -> Path:
    """Point XDG_CONFIG_HOME at an empty directory and clear overrides."""
    config_home = tmp_path / "xdg"
    config_home.mkdir()
    monkeypatch.setenv("XDG_CONFIG_HOME", str(config_home))
    for var in ("OSWO_LOG_LEVEL", "OSWO_SWAYMSG", "OSWO_TIMEOUT"):
        monkeypatch.delenv(var, raising=False)
    return config_home


@pytest.fixture
def test_config(config_file: Path, isolated_env: Path) -> Config:
    return Config.load(config_file=config_file)


# ============================================================================
# Shared step definitions
# ============================================================================

@pytest.fixture
def layout_context() -> Dict[str, Any]:
    """State shared between the steps of one scenario."""
    return {
        "world": [],  # Output records currently plugged in
        "profiles": {},
        "transport": None,
        "fail_on": None,
        "error": None,
    }


def parse_modes(modes: str) -> List[Tuple[int, int]]:
    """Parse "2560x1440,3840x2160"."""
    result = []
    for mode in modes.split(","):
        width, height = mode.strip().split("x")
        result.append((int(width), int(height)))
    return result


def parse_profile_outputs(outputs: str) -> Tuple[DesiredOutput, ...]:
    """Parse "Dell U2720Q@1.5,Sharp LQ140"."""
    entries = []
    for item in outputs.split(","):
        identity, _, scale = item.strip().partition("@")
        entries.append(DesiredOutput(identity, float(scale) if scale else None))
    return tuple(entries)


def transport_for(context: Dict[str, Any]) -> FakeTransport:
    """The scenario's compositor, created from the outputs declared so far."""
    if context["transport"] is None:
        transport = FakeTransport(context["world"])
        transport.fail_on = context["fail_on"]
        context["transport"] = transport
    return context["transport"]


def store_for(context: Dict[str, Any]) -> ProfileStore:
    return ProfileStore(context["profiles"])


@given(parsers.parse('a connected output "{name}" with identity "{identity}" and modes "{modes}"'))
def given_connected_output(layout_context, name, identity, modes):
    layout_context["world"].append(sway_output(name, "", identity, modes=parse_modes(modes)))


@given(parsers.parse('a profile "{name}" with outputs "{outputs}"'))
def given_profile(layout_context, name, outputs):
    layout_context["profiles"][name] = Profile(name, parse_profile_outputs(outputs))


@given(parsers.parse('the compositor rejects commands for "{name}"'))
def given_rejected_commands(layout_context, name):
    layout_context["fail_on"] = f"output {name} "


@then(parsers.parse('output "{name}" is enabled at {x:d},{y:d} with scale {scale:g}'))
def then_output_enabled(layout_context, name, x, y, scale):
    record = next(r for r in transport_for(layout_context).records if r["name"] == name)
    assert record["active"] is True
    assert (record["rect"]["x"], record["rect"]["y"]) == (x, y)
    assert record["scale"] == scale


@then(parsers.parse('output "{name}" is disabled'))
def then_output_disabled(layout_context, name):
    record = next(r for r in transport_for(layout_context).records if r["name"] == name)
    assert record["active"] is False


@then("no commands were issued")
def then_no_commands(layout_context):
    assert transport_for(layout_context).commands == []


@then(parsers.parse("{count:d} command was issued"))
@then(parsers.parse("{count:d} commands were issued"))
def then_command_count(layout_context, count):
    assert len(transport_for(layout_context).commands) == count
