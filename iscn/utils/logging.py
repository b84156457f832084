"""A print-based logger for interactive labs.

The labs run inside notebooks and `panel serve` consoles, where standard
Python logging stays silent unless configured. This logger prints to stdout
with a timestamped header and a level label instead.

Messages below the threshold are dropped. The threshold comes from the
`level` argument, else the ISCN_LOG_LEVEL environment variable, else INFO,
so per-frame DEBUG chatter from the animation loop stays quiet by default.

Usage:
    from iscn.utils import get_logger
    log = get_logger("probability.session")
    log.info("Switching to %s mode", "poisson")
"""

import os
import sys
from datetime import datetime

LEVELS = {"DEBUG": 10, "INFO": 20, "WARNING": 30, "ERROR": 40}


def _threshold(level):
    name = (level or os.environ.get("ISCN_LOG_LEVEL") or "INFO").upper()
    if name not in LEVELS:
        raise ValueError(f"Unknown log level {name!r}; expected one of {list(LEVELS)}")
    return LEVELS[name]


def get_logger(name, out=None, level=None):
    """Create a print-based logger.

    Parameters
    ----------
    name : str
        Logger name, displayed in every message header.
    out : file-like, optional
        Additional output stream (e.g., an open log file).
    level : str, optional
        Minimum level printed: DEBUG, INFO, WARNING or ERROR.

    Returns
    -------
    callable
        A log function with .debug, .info, .warning, .error methods,
        and a .level attribute holding the numeric threshold.
    """
    prefix = f"iscn:{name}"
    rule = "_" * 72
    outputs = [sys.stdout] + ([out] if out else [])

    def log(label, msg, args):
        if LEVELS[label] < log.level:
            return
        stamp = datetime.now().strftime("%H:%M:%S")
        try:
            text = msg % args if args else msg
        except TypeError:
            text = msg
        for dest in outputs:
            print(rule, file=dest)
            print(f"{prefix} {label} [{stamp}]", file=dest)
            print(text, file=dest)

    log.level = _threshold(level)
    log.debug = lambda msg, *args: log("DEBUG", msg, args)
    log.info = lambda msg, *args: log("INFO", msg, args)
    log.warning = lambda msg, *args: log("WARNING", msg, args)
    log.error = lambda msg, *args: log("ERROR", msg, args)

    return log
