"""Logging setup helper."""

import logging


def setup_logging(debug: bool = False) -> None:
    """Setup logging configuration for command-line use.

    Args:
        debug: Enable debug logging
    """
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.WARNING,
        format="[%(asctime)s][%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )
