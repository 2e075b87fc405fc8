"""Show command."""

from ..layout import current_layout_view
from ..transport import Transport, snapshot


def show_outputs(transport: Transport, verbose: bool = False) -> None:
    """Print every connected output with its current placement."""
    print(current_layout_view(snapshot(transport), verbose=verbose))
