"""Logging configuration"""

import logging

from rich.console import Console
from rich.logging import RichHandler

_PLAIN_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_logging(level_name: str = "INFO") -> None:
    """Configure root logging with a Rich handler"""
    level = getattr(logging, level_name.upper(), logging.INFO)

    try:
        rich_handler = RichHandler(
            console=Console(width=120),
            show_time=True,
            show_level=True,
            show_path=False,
            markup=False,
            rich_tracebacks=True,
            tracebacks_show_locals=False,
            tracebacks_width=120,
        )
        rich_handler.setFormatter(logging.Formatter(fmt="%(message)s", datefmt="[%Y-%m-%d %H:%M:%S]"))
        logging.basicConfig(level=level, handlers=[rich_handler], force=True)
    except Exception as e:
        logging.basicConfig(level=level, format=_PLAIN_FORMAT, datefmt="%Y-%m-%d %H:%M:%S", force=True)
        logging.getLogger(__name__).warning(f"Rich logging setup failed: {e}, using standard logging")

    # Reduce library log noise
    logging.getLogger("discord").setLevel(logging.WARNING)
    logging.getLogger("discord.http").setLevel(logging.WARNING)
    logging.getLogger("aiohttp").setLevel(logging.WARNING)
