"""
Logging Configuration.

All modules obtain their logger through :func:`get_logger` so that log
lines share one format. The geodetic core is pure computation, so it only
logs notable events at DEBUG and suspicious input at WARNING; per-point
projection paths never log.

Consistency checks report through :func:`log_check`, which writes one
``CHECK | name | PASS/FAIL | details`` line per check.
"""

import logging
import sys


LOG_FORMAT = '%(asctime)s | %(name)s | %(levelname)s | %(message)s'
DATE_FORMAT = '%Y-%m-%d %H:%M:%S'


def get_logger(name: str, level: int = logging.INFO) -> logging.Logger:
    """Get a logger configured for the geodetic tiling core.

    Parameters
    ----------
    name : str
        Logger name (typically __name__).
    level : int
        Logging level.

    Returns
    -------
    logging.Logger
        Logger writing to stdout; the handler is attached once per name.
    """
    logger = logging.getLogger(name)

    if not logger.handlers:
        stream = logging.StreamHandler(sys.stdout)
        stream.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))
        logger.addHandler(stream)

    logger.setLevel(level)
    return logger


def log_check(logger: logging.Logger, check_name: str, passed: bool, details: str) -> None:
    """Log the outcome of a consistency check.

    Passing checks go to DEBUG, failures to WARNING.
    """
    status = "PASS" if passed else "FAIL"
    line = f"CHECK | {check_name} | {status} | {details}"
    if passed:
        logger.debug(line)
    else:
        logger.warning(line)
