import logging
import sys

from flowgen.utils.log import configure_logging, get_logger


def test_configure_logging_installs_single_stdout_handler():
    root = logging.getLogger()
    saved_handlers, saved_level = root.handlers[:], root.level
    try:
        configure_logging("DEBUG")
        configure_logging("DEBUG")

        stream_handlers = [h for h in root.handlers if isinstance(h, logging.StreamHandler)]
        assert len(stream_handlers) == 1
        assert stream_handlers[0].stream is sys.stdout
        assert root.level == logging.DEBUG
        assert logging.getLogger("urllib3").level == logging.WARNING
    finally:
        root.handlers[:] = saved_handlers
        root.setLevel(saved_level)


def test_get_logger_is_named():
    assert get_logger("flowgen.pipeline").name == "flowgen.pipeline"
