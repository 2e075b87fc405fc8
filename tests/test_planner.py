"""Tests for layout planning."""

import pytest

from oswo.config import DesiredOutput
from oswo.exceptions import NoMatchingOutputsError, PlanError, UnresolvedIdentityError
from oswo.outputs import Mode, MonitorSnapshot, snapshots_from_sway
from oswo.planner import DisableOutput, EnableOutput, best_mode, plan, plan_manual

from conftest import DELL_ID, LAPTOP_ID, LG_ID, dell, laptop, lg, sway_output


@pytest.fixture
def connected():
    return snapshots_from_sway([laptop(), dell(position=(1920, 0)), lg(active=False)])


class TestBestMode:

    def test_largest_area_wins(self):
        modes = [Mode(1920, 1080), Mode(3840, 2160), Mode(2560, 1440)]
        assert best_mode(modes) == Mode(3840, 2160)

    def test_first_wins_on_equal_area(self):
        modes = [Mode(1920, 1080, 60000), Mode(1080, 1920, 60000), Mode(1920, 1080, 144000)]
        assert best_mode(modes) == Mode(1920, 1080, 60000)

    def test_no_modes(self):
        assert best_mode([]) is None


class TestPlan:
    """Planning a stored profile."""

    def test_tiles_left_to_right_at_best_mode(self, connected):
        desired = [DesiredOutput(DELL_ID, 1.5), DesiredOutput(LAPTOP_ID)]
        actions = plan(connected, desired)

        assert actions == [
            DisableOutput("HDMI-A-1"),
            EnableOutput("DP-1", (0, 0), (3840, 2160), 1.5),
            EnableOutput("eDP-1", (3840, 0), (1920, 1080), 1.0),
        ]

    def test_one_action_per_connected_output(self, connected):
        actions = plan(connected, [DesiredOutput(LAPTOP_ID)])
        assert sorted(a.name for a in actions) == sorted(m.name for m in connected)

    def test_x_offset_ignores_scale(self, connected):
        actions = plan(connected, [DesiredOutput(LAPTOP_ID, 2.0), DesiredOutput(LG_ID)])
        enables = [a for a in actions if isinstance(a, EnableOutput)]
        assert enables[1].position == (1920, 0)

    def test_unresolved_identity_raises(self, connected):
        desired = [DesiredOutput(LAPTOP_ID), DesiredOutput("Acme X1")]
        with pytest.raises(UnresolvedIdentityError) as exc_info:
            plan(connected, desired)
        assert exc_info.value.identity == "Acme X1"
        assert isinstance(exc_info.value, PlanError)

    def test_disables_in_compositor_order(self, connected):
        actions = plan(connected, [DesiredOutput(LG_ID)])
        assert actions[:2] == [DisableOutput("eDP-1"), DisableOutput("DP-1")]

    def test_duplicate_identity_first_port_wins(self):
        twins = snapshots_from_sway([
            sway_output("DP-1", "Dell Inc.", "DELL U2720Q"),
            sway_output("DP-2", "Dell Inc.", "DELL U2720Q"),
        ])
        actions = plan(twins, [DesiredOutput(DELL_ID)])
        assert actions == [
            DisableOutput("DP-2"),
            EnableOutput("DP-1", (0, 0), (1920, 1080), 1.0),
        ]

    def test_output_without_modes_requests_zero_resolution(self):
        bare = snapshots_from_sway([sway_output("DP-9", "Acme", "Blank", modes=[])])
        actions = plan(bare, [DesiredOutput("Acme Blank")])
        assert actions == [EnableOutput("DP-9", (0, 0), (0, 0), 1.0)]

    def test_empty_profile_disables_everything(self, connected):
        actions = plan(connected, [])
        assert all(isinstance(a, DisableOutput) for a in actions)
        assert len(actions) == 3


class TestPlanManual:
    """Planning by output name."""

    def test_names_match_case_insensitively(self, connected):
        actions = plan_manual(connected, ["dp-1", "EDP-1"])
        assert actions == [
            DisableOutput("HDMI-A-1"),
            EnableOutput("DP-1", (0, 0), (3840, 2160), 1.0),
            EnableOutput("eDP-1", (3840, 0), (1920, 1080), 1.0),
        ]

    def test_unknown_names_are_skipped(self, connected):
        actions = plan_manual(connected, ["VGA-1", "eDP-1"])
        enables = [a for a in actions if isinstance(a, EnableOutput)]
        assert [a.name for a in enables] == ["eDP-1"]

    def test_repeated_name_counts_once(self, connected):
        actions = plan_manual(connected, ["eDP-1", "edp-1"])
        enables = [a for a in actions if isinstance(a, EnableOutput)]
        assert len(enables) == 1

    def test_keeps_current_scale(self):
        scaled = snapshots_from_sway([laptop(scale=1.25)])
        actions = plan_manual(scaled, ["eDP-1"])
        assert actions == [EnableOutput("eDP-1", (0, 0), (1920, 1080), 1.25)]

    def test_no_match_raises(self, connected):
        with pytest.raises(NoMatchingOutputsError) as exc_info:
            plan_manual(connected, ["VGA-1"])
        assert "VGA-1" in str(exc_info.value)
        assert "eDP-1" in str(exc_info.value)


class TestCommands:

    def test_enable_command(self):
        action = EnableOutput("DP-1", (1920, 0), (2560, 1440), 1.5)
        assert action.to_command() == "output DP-1 enable position 1920 0 resolution 2560x1440 scale 1.5"

    def test_enable_command_integral_scale(self):
        action = EnableOutput("eDP-1", (0, 0), (1920, 1080), 1.0)
        assert action.to_command().endswith("scale 1")

    def test_disable_command(self):
        assert DisableOutput("HDMI-A-1").to_command() == "output HDMI-A-1 disable"


class TestPlanProperties:

    @pytest.mark.parametrize("order", [
        [DELL_ID, LAPTOP_ID, LG_ID],
        [LG_ID, DELL_ID],
        [LAPTOP_ID],
    ])
    def test_tiling_invariant(self, connected, order):
        actions = plan(connected, [DesiredOutput(i) for i in order])
        enables = [a for a in actions if isinstance(a, EnableOutput)]
        for left, right in zip(enables, enables[1:]):
            assert right.position[0] == left.position[0] + left.resolution[0]
        assert all(a.position[1] == 0 for a in enables)
        assert enables[0].position == (0, 0)

    def test_plan_is_deterministic(self, connected):
        desired = [DesiredOutput(LG_ID, 1.5), DesiredOutput(DELL_ID)]
        first = [a.to_command() for a in plan(connected, desired)]
        second = [a.to_command() for a in plan(connected, desired)]
        assert first == second

    def test_snapshot_not_modified(self, connected):
        before = tuple(connected)
        plan(connected, [DesiredOutput(LAPTOP_ID)])
        assert tuple(connected) == before
        assert isinstance(connected[0], MonitorSnapshot)
