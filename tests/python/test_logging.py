import logging

from albiome.logging_utils import ROOT_LOGGER, configure_logging


def test_configure_logging_is_idempotent():
    logger = configure_logging("DEBUG")
    handlers = list(logger.handlers)
    try:
        assert logger.name == ROOT_LOGGER
        assert logger.level == logging.DEBUG
        again = configure_logging("warning")
        assert again is logger
        assert again.level == logging.WARNING
        assert again.handlers == handlers
        assert len(handlers) == 1
    finally:
        logger.setLevel(logging.INFO)


def test_unknown_level_falls_back_to_info():
    logger = configure_logging("chatty")
    assert logger.level == logging.INFO


def test_module_loggers_share_the_tree():
    configure_logging("INFO")
    child = logging.getLogger("albiome.simulation")
    assert child.getEffectiveLevel() == logging.INFO
    assert child.parent is logging.getLogger(ROOT_LOGGER)


def test_host_entry_point_does_not_leak_handlers_between_tests(tmp_path):
    from albiome.app.headless import main

    main(["--steps", "1", "--seed", "1", "--log", str(tmp_path / "run.csv")])
    assert len(logging.getLogger(ROOT_LOGGER).handlers) == 1


def test_each_test_starts_without_albiome_handlers():
    assert logging.getLogger(ROOT_LOGGER).handlers == []
