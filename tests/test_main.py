import logging

import pytest

from galaxia import main


def test_parser_defaults():
    args = main.build_parser().parse_args([])
    assert args.backend == "auto"
    assert args.seed is None
    assert args.log_level == "WARNING"


def test_parser_accepts_options():
    args = main.build_parser().parse_args(["--backend", "raster", "--seed", "12", "--log-level", "debug"])
    assert args.backend == "raster"
    assert args.seed == 12
    assert args.log_level == "DEBUG"


def test_parser_rejects_unknown_backend():
    with pytest.raises(SystemExit):
        main.build_parser().parse_args(["--backend", "vulkan"])


def test_configure_logging_sets_level_and_format(monkeypatch):
    calls = []
    monkeypatch.setattr(logging, "basicConfig", lambda **kwargs: calls.append(kwargs))
    main.configure_logging("debug")
    assert calls == [{"level": logging.DEBUG, "format": main.LOG_FORMAT, "force": True}]
    assert main.LOG_FORMAT.startswith("[Galaxia][%(levelname)s]")


def test_configure_logging_rejects_unknown_level():
    with pytest.raises(ValueError):
        main.configure_logging("chatty")


def test_qt_import_failure_message_names_the_missing_library():
    message = main.qt_import_failure_message(ImportError("libGL.so.1: cannot open shared object file"))
    assert "libGL.so.1" in message
    assert "hint: install the Mesa OpenGL runtime" in message


def test_qt_import_failure_message_without_known_cause_has_no_hint():
    message = main.qt_import_failure_message(ImportError("something else"))
    assert message.startswith("galaxia: cannot load the Qt bindings")
    assert "hint" not in message
