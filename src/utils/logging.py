"""Logger factory for the road generator.

Every module obtains its logger through :func:`get_logger` so that the
catalog loader, the builders and the pipeline all write the same
single-line format to stderr.  The level defaults to INFO; pass
``level`` to change it for one logger (the CLI does this for
``--verbose``).
"""

import logging
from typing import Optional


def get_logger(name: str, level: Optional[int] = None) -> logging.Logger:
    """Return a logger with a stream handler and the preset format."""
    logger = logging.getLogger(name)
    if not logger.handlers:
        handler = logging.StreamHandler()
        formatter = logging.Formatter(
            fmt='[%(asctime)s] [%(levelname)s] %(name)s: %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        )
        handler.setFormatter(formatter)
        logger.addHandler(handler)
        logger.setLevel(logging.INFO)
    if level is not None:
        logger.setLevel(level)
    return logger
