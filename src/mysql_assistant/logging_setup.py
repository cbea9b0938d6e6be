import logging

from rich.console import Console
from rich.logging import RichHandler


def setup_logging(verbosity: int = 0) -> None:
    """WARNING by default, DEBUG from one -v on. Logs go to stderr."""
    level = logging.DEBUG if verbosity >= 1 else logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), show_path=verbosity >= 2)],
        force=True,
    )
