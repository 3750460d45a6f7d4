import logging
import os
import sys
import traceback
import pendulum

from pwdsafe.config.config_safe import LOG_FILE

# File named in the uncaught exception notice
_log_file = LOG_FILE


def setup_logging(log_file: str = LOG_FILE) -> None:
    global _log_file

    if logging.getLogger().handlers:
        return  # already configured

    _log_file = log_file

    logging.basicConfig(
        filename=log_file,
        filemode="a",
        level=logging.ERROR,
        format="%(message)s",
    )

    sys.excepthook = log_uncaught_exceptions


def log_uncaught_exceptions(exctype, value, tb):
    now = pendulum.now().to_iso8601_string()

    lines = []
    for frame in traceback.extract_tb(tb):
        filename = os.path.basename(frame.filename)
        lines.append(
            f'  File "{filename}", line {frame.lineno}, in {frame.name}'
        )

    trace_summary = "\n".join(reversed(lines)) if lines else "  <no traceback>"
    error_msg = f"{exctype.__name__}: {value}"

    logging.error(
        f"[{now}] Uncaught exception: {error_msg}\n"
        f"Traceback (most recent call last):\n"
        f"{trace_summary}\n"
        f"{error_msg}\n"
    )

    print("\nError! Something went wrong.", file=sys.stderr)
    print(f"Details saved to {_log_file}\n", file=sys.stderr)


def log_error(logger: logging.Logger, msg: str) -> None:
    """
    Log an error with a pendulum timestamp prefix.

    Callers must never pass passphrases or entry passwords in `msg`.
    """
    now = pendulum.now().to_iso8601_string()
    logger.error(f"[{now}] {msg}\n")
