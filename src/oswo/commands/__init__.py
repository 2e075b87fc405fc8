"""CLI commands module."""

from .show import show_outputs
from .activate import set_outputs, use_profile, auto_profile, run_daemon
from .profiles import list_profiles, save_profile

__all__ = [
    "show_outputs",
    "set_outputs",
    "use_profile",
    "auto_profile",
    "run_daemon",
    "list_profiles",
    "save_profile",
]
