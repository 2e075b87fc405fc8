"""
Layout application.

Issues planned actions as individual compositor commands. Sway has no
multi-command transaction, so application is an ordered sequence of
independent commands: the first failure stops the sequence and nothing
already applied is rolled back.

Disables are issued before enables.
"""

import logging
from typing import Callable, List, Optional, Sequence

from .exceptions import CommandFailedError, TransportError
from .planner import DisableOutput, OutputAction
from .transport import Transport

logger = logging.getLogger(__name__)


def execution_order(actions: Sequence[OutputAction]) -> List[OutputAction]:
    """Disables first, then enables, keeping relative order within each group."""
    disables = [a for a in actions if isinstance(a, DisableOutput)]
    enables = [a for a in actions if not isinstance(a, DisableOutput)]
    return disables + enables


class LayoutApplicator:
    """Applies planned actions through a transport."""

    def __init__(
        self,
        transport: Transport,
        echo: Optional[Callable[[str], None]] = None,
    ) -> None:
        """
        Args:
            transport: Compositor connection used for commands
            echo: Optional operator-facing sink for each command (e.g. print)
        """
        self.transport = transport
        self.echo = echo

    def _echo(self, command: str) -> None:
        logger.info(command)
        if self.echo is None:
            return
        try:
            self.echo(command)
        except OSError as e:
            logger.warning(f"Could not echo command: {e}")

    def apply(self, actions: Sequence[OutputAction]) -> List[str]:
        """
        Issue one command per action.

        Args:
            actions: Planned actions

        Returns:
            Commands issued, in order

        Raises:
            CommandFailedError: On the first rejected command
        """
        issued: List[str] = []
        for index, action in enumerate(execution_order(actions)):
            command = action.to_command()
            self._echo(command)
            try:
                self.transport.run_command(command)
            except TransportError as e:
                raise CommandFailedError(index, action, str(e)) from e
            issued.append(command)
        return issued
