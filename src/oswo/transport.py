"""
Compositor IPC transport.

Talks to sway through the swaymsg client:

- swaymsg -r -t get_outputs                (query)
- swaymsg -r <command>                     (one command per call)
- swaymsg -r -m -t subscribe '["output"]'  (blocking event stream)
"""

import json
import logging
import subprocess
from abc import ABC, abstractmethod
from typing import Any, Dict, Iterator, List, Optional, Tuple

from .exceptions import (
    CompositorCommandError,
    CompositorCommunicationError,
    CompositorNotFoundError,
    TransportFatalError,
)
from .outputs import MonitorSnapshot, snapshots_from_sway

logger = logging.getLogger(__name__)


class Transport(ABC):
    """Abstract compositor connection."""

    @abstractmethod
    def list_outputs(self) -> List[Dict[str, Any]]:
        """
        Query every known output, active or not.

        Returns:
            Raw output records in compositor order
        """
        pass

    @abstractmethod
    def run_command(self, command: str) -> None:
        """
        Execute one textual command.

        Raises:
            TransportError: If the compositor rejects the command
        """
        pass

    @abstractmethod
    def subscribe_output_events(self) -> Iterator[Dict[str, Any]]:
        """
        Subscribe to output changes.

        The subscription is established when this returns; iterating
        blocks until the next notification.

        Raises:
            TransportFatalError: When the subscription fails or breaks
        """
        pass


class SwayTransport(Transport):
    """Sway IPC via the swaymsg command."""

    def __init__(
        self,
        swaymsg: str = "swaymsg",
        socket: Optional[str] = None,
        timeout: int = 10,
    ) -> None:
        self.swaymsg = swaymsg
        self.socket = socket
        self.timeout = timeout

    @classmethod
    def from_config(cls, sway_config) -> 'SwayTransport':
        return cls(
            swaymsg=sway_config.swaymsg,
            socket=sway_config.socket,
            timeout=sway_config.timeout,
        )

    def _base_cmd(self) -> List[str]:
        cmd = [self.swaymsg, "-r"]
        if self.socket:
            cmd += ["-s", self.socket]
        return cmd

    def _not_found(self) -> CompositorNotFoundError:
        return CompositorNotFoundError(
            f"Could not find '{self.swaymsg}' command.\n"
            "Make sure sway is installed and in PATH."
        )

    def _run(self, args: List[str]) -> Tuple[int, Any, str]:
        """
        Run swaymsg and parse its JSON reply.

        Returns:
            (exit code, parsed reply, stderr)
        """
        cmd = self._base_cmd() + args
        cmd_str = ' '.join(cmd)
        logger.debug(f"Running: {cmd_str}")

        try:
            result = subprocess.run(
                cmd,
                capture_output=True,
                text=True,
                timeout=self.timeout,
            )
        except subprocess.TimeoutExpired as e:
            raise CompositorCommunicationError(
                f"Timeout talking to sway after {e.timeout}s.\n"
                f"'{cmd_str}' took too long to respond."
            ) from e
        except FileNotFoundError as e:
            raise self._not_found() from e

        stdout = result.stdout.strip()
        if not stdout:
            error_msg = result.stderr.strip() or "Unknown error"
            raise CompositorCommunicationError(
                f"Failed to talk to sway: {error_msg}\n"
                "Make sure sway is running and SWAYSOCK is set."
            )

        try:
            reply = json.loads(stdout)
        except json.JSONDecodeError as e:
            raise CompositorCommunicationError(
                f"Failed to parse sway JSON output: {e}\n"
                "The compositor returned invalid JSON. This may indicate a version mismatch."
            ) from e

        return result.returncode, reply, result.stderr.strip()

    def list_outputs(self) -> List[Dict[str, Any]]:
        returncode, reply, stderr = self._run(["-t", "get_outputs"])
        if returncode != 0 or not isinstance(reply, list):
            raise CompositorCommunicationError(
                f"Failed to list outputs from sway: {stderr or reply}\n"
                "Make sure sway is running and 'swaymsg -t get_outputs' works."
            )
        return reply

    def run_command(self, command: str) -> None:
        _, reply, stderr = self._run([command])
        # One reply entry per command in the payload
        entries = reply if isinstance(reply, list) else [reply]
        for entry in entries:
            if not isinstance(entry, dict) or not entry.get("success", False):
                error = entry.get("error") if isinstance(entry, dict) else None
                raise CompositorCommandError(
                    f"sway rejected '{command}': {error or stderr or entry}"
                )

    def subscribe_output_events(self) -> Iterator[Dict[str, Any]]:
        cmd = self._base_cmd() + ["-m", "-t", "subscribe", '["output"]']
        logger.debug(f"Subscribing: {' '.join(cmd)}")

        try:
            process = subprocess.Popen(
                cmd,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                text=True,
            )
        except FileNotFoundError as e:
            raise self._not_found() from e

        # Wait for the acknowledgement so the subscription is live on return
        try:
            ack = self._read_payload(process)
            if ack is None or not ack.get("success", False):
                raise TransportFatalError(f"sway refused the output subscription: {ack}")
        except TransportFatalError:
            self._stop(process)
            raise

        logger.debug("Subscribed to output events")
        return self._events(process)

    def _read_payload(self, process: subprocess.Popen) -> Optional[Dict[str, Any]]:
        """Next JSON payload from the stream, or None at end of stream."""
        for line in process.stdout:
            line = line.strip()
            if not line:
                continue
            try:
                payload = json.loads(line)
            except json.JSONDecodeError as e:
                raise TransportFatalError(f"Malformed event from sway: {line!r}") from e
            if not isinstance(payload, dict):
                raise TransportFatalError(f"Unexpected event from sway: {payload!r}")
            return payload
        return None

    def _events(self, process: subprocess.Popen) -> Iterator[Dict[str, Any]]:
        try:
            while True:
                payload = self._read_payload(process)
                if payload is None:
                    break
                yield payload

            process.wait()
            stderr = process.stderr.read().strip() if process.stderr else ""
            raise TransportFatalError(
                f"Output event stream ended (swaymsg exit code {process.returncode})"
                + (f": {stderr}" if stderr else "")
            )
        finally:
            self._stop(process)

    @staticmethod
    def _stop(process: subprocess.Popen) -> None:
        if process.poll() is None:
            process.terminate()
            process.wait()


def snapshot(transport: Transport) -> Tuple[MonitorSnapshot, ...]:
    """Take a fresh snapshot of every connected output."""
    return snapshots_from_sway(transport.list_outputs())
