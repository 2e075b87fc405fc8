"""
oswo - Organise sway outputs.

Enumerate connected outputs, match them against named layout profiles and
apply the best fit, once or every time a monitor is plugged in.
"""

__version__ = "0.3.0"

from .config import Config, DesiredOutput, Profile, ProfileStore
from .outputs import Mode, MonitorSnapshot
from .selector import select_profile
from .planner import EnableOutput, DisableOutput, plan, plan_manual, best_mode
from .applicator import LayoutApplicator
from .transport import Transport, SwayTransport
from .layout import activate_profile, activate_manual, activate_best, current_layout_view
from .daemon import ChangeMonitor, DaemonState, reconcile_forever

__all__ = [
    "Config",
    "DesiredOutput",
    "Profile",
    "ProfileStore",
    "Mode",
    "MonitorSnapshot",
    "select_profile",
    "EnableOutput",
    "DisableOutput",
    "plan",
    "plan_manual",
    "best_mode",
    "LayoutApplicator",
    "Transport",
    "SwayTransport",
    "activate_profile",
    "activate_manual",
    "activate_best",
    "current_layout_view",
    "ChangeMonitor",
    "DaemonState",
    "reconcile_forever",
]
