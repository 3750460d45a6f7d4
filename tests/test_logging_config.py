import contextlib
import logging
import sys

from pwdsafe.config import logging_config
from pwdsafe.config.logging_config import (log_error, log_uncaught_exceptions,
                                           setup_logging)


@contextlib.contextmanager
def bare_root_logger():
    """
    Root logger with no handlers, restored on exit.

    Used inside the test body because pytest attaches its own capture
    handlers to the root logger for each test phase.
    """
    root = logging.getLogger()
    handlers = root.handlers[:]
    level = root.level
    hook = sys.excepthook
    log_file = logging_config._log_file
    root.handlers.clear()
    try:
        yield root
    finally:
        for handler in root.handlers:
            handler.close()
        root.handlers[:] = handlers
        root.setLevel(level)
        sys.excepthook = hook
        logging_config._log_file = log_file


def test_setup_logging_installs_excepthook(tmp_path):
    with bare_root_logger() as root:
        setup_logging(str(tmp_path / "pwd-errors.log"))
        assert sys.excepthook is log_uncaught_exceptions
        assert root.level == logging.ERROR


def test_uncaught_exception_names_configured_file(tmp_path, capsys):
    log_file = tmp_path / "pwd-errors.log"
    with bare_root_logger():
        setup_logging(str(log_file))
        log_uncaught_exceptions(ValueError, ValueError("boom"), None)

    err = capsys.readouterr().err
    assert f"Details saved to {log_file}" in err
    assert "ValueError: boom" in log_file.read_text()


def test_setup_logging_keeps_existing_configuration(tmp_path):
    with bare_root_logger() as root:
        setup_logging(str(tmp_path / "first.log"))
        setup_logging(str(tmp_path / "second.log"))
        assert len(root.handlers) == 1
        assert logging_config._log_file == str(tmp_path / "first.log")
    assert not (tmp_path / "second.log").exists()


def test_log_error_is_timestamped(tmp_path):
    log_file = tmp_path / "pwd-errors.log"
    with bare_root_logger():
        setup_logging(str(log_file))
        log_error(logging.getLogger("pwdsafe.test"), "gpg exited with status 2")

    text = log_file.read_text()
    assert text.startswith("[")
    assert "] gpg exited with status 2" in text
