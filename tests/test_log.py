import logging

from inkspell.log import configure_logging


def test_configure_logging_sets_root_level(monkeypatch):
    root = logging.getLogger()
    monkeypatch.setattr(root, "handlers", [logging.NullHandler()])
    monkeypatch.setattr(root, "level", root.level)

    configure_logging({"log_level": "debug"})
    assert root.level == logging.DEBUG

    configure_logging({"log_level": "nonsense"})
    assert root.level == logging.INFO
