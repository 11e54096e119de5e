import logging
import sys


def configure_logging(level: str = "INFO", debug: bool = False) -> None:
    """Print package loggers (API client, store) to stdout."""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        stream=sys.stdout,
    )
    if debug:
        logging.getLogger("fitness_tracker").setLevel(logging.DEBUG)
