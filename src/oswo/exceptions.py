"""
Common exception classes for oswo.

Provides domain-specific exceptions for consistent error handling across modules.
All exceptions inherit from OswoError for unified catching at CLI level.
"""


class OswoError(Exception):
    """
    Base exception for all oswo errors.

    All domain-specific exceptions inherit from this class, allowing
    callers to catch all oswo errors with a single except clause.
    """
    pass


# ============================================================================
# Configuration Errors
# ============================================================================

class ConfigError(OswoError):
    """
    Configuration-related errors.

    Raised when:
    - Config file is malformed or unreadable
    - Unknown sections or keys are present
    - A profile entry cannot be normalized
    """
    pass


class ConfigValidationError(ConfigError):
    """
    Config value validation failed.

    Raised when a config value is present but invalid (e.g., empty identity,
    non-positive scale, duplicate identity inside one profile).
    """
    pass


# ============================================================================
# Profile Errors
# ============================================================================

class ProfileError(OswoError):
    """Base class for errors choosing a profile."""
    pass


class ProfileNotFoundError(ProfileError):
    """An explicitly named profile does not exist in the profile store."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Profile '{name}' not found in configuration")


class NoEligibleProfileError(ProfileError):
    """
    No stored profile fits the connected outputs.

    The daemon treats this as a no-op; one-shot commands report it.
    """
    pass


# ============================================================================
# Planning Errors
# ============================================================================

class PlanError(OswoError):
    """
    Layout planning errors.

    Planning happens before any command is issued, so a PlanError
    guarantees that the output layout was not touched.
    """
    pass


class UnresolvedIdentityError(PlanError):
    """A profile references an identity that is not currently connected."""

    def __init__(self, identity: str) -> None:
        self.identity = identity
        super().__init__(f"No connected output matches identity '{identity}'")


class NoMatchingOutputsError(PlanError):
    """None of the requested output names is connected."""
    pass


# ============================================================================
# Transport Errors
# ============================================================================

class TransportError(OswoError):
    """
    Compositor IPC errors.

    Base class for failures querying or commanding the compositor.
    """
    pass


class CompositorNotFoundError(TransportError):
    """
    The compositor client is not available.

    Raised when swaymsg is not installed or not in PATH.
    """
    pass


class CompositorCommunicationError(TransportError):
    """
    Failed to communicate with the compositor.

    Raised when an IPC query fails, times out, or returns invalid JSON.
    """
    pass


class CompositorCommandError(TransportError):
    """The compositor rejected a command."""
    pass


class CommandFailedError(TransportError):
    """
    Applying a planned action failed.

    Carries the position of the action in execution order and the action
    itself. Commands issued before it are not rolled back.
    """

    def __init__(self, index: int, action, reason: str) -> None:
        self.index = index
        self.action = action
        self.reason = reason
        super().__init__(
            f"Command #{index} for output '{action.name}' failed: {reason}\n"
            f"Command: {action.to_command()}\n"
            "Commands issued before it were not rolled back."
        )


class TransportFatalError(TransportError):
    """
    The output event subscription broke.

    Terminates the daemon.
    """
    pass
