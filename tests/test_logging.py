import logging
from pathlib import Path

import pytest

import satis_purge.utils.logging as log_mod


@pytest.fixture(autouse=True)
def _reset_logging_state(monkeypatch):
    """
    Keep tests isolated while being compatible with pytest's own log capture handler.

    We reset module globals and test idempotency by comparing handler counts.
    """
    monkeypatch.setattr(log_mod, "_CONFIGURED", False, raising=True)
    monkeypatch.setattr(log_mod, "_CURRENT_LOG_FILE", None, raising=True)
    monkeypatch.setattr(log_mod._HANDLER_RUN_ID, "run_id", None, raising=True)
    yield


def _count_file_handlers(root: logging.Logger) -> int:
    return sum(1 for h in root.handlers if isinstance(h, logging.FileHandler))


def test_configure_logging_idempotent_does_not_duplicate_handlers():
    root = logging.getLogger()

    before = len(root.handlers)
    log_mod.configure_logging(level="INFO", log_file=None)
    after_first = len(root.handlers)
    assert after_first >= before

    log_mod.configure_logging(level="INFO", log_file=None)
    assert len(root.handlers) == after_first


def test_configure_logging_adds_file_handler_once(tmp_path: Path):
    root = logging.getLogger()
    log_file = tmp_path / "logs" / "purge.log"

    before_files = _count_file_handlers(root)
    try:
        log_mod.configure_logging(level="INFO", log_file=str(log_file))
        after_files = _count_file_handlers(root)

        assert after_files == before_files + 1
        assert log_file.parent.exists()

        log_mod.configure_logging(level="INFO", log_file=str(log_file))
        assert _count_file_handlers(root) == after_files
    finally:
        for h in list(root.handlers):
            if isinstance(h, logging.FileHandler) and Path(h.baseFilename) == log_file.resolve():
                root.removeHandler(h)
                h.close()


def test_get_logger_lazy_configures():
    assert log_mod._CONFIGURED is False

    root = logging.getLogger()
    before = len(root.handlers)

    lg = log_mod.get_logger("satis_purge.x")
    assert isinstance(lg, logging.Logger)
    assert log_mod._CONFIGURED is True

    after = len(root.handlers)
    assert after >= before

    lg2 = log_mod.get_logger("satis_purge.x")
    assert lg2 is lg
    assert len(root.handlers) == after


def test_get_logger_run_id_filter_attached_idempotent():
    log_mod.configure_logging(level="INFO", log_file=None)

    lg = log_mod.get_logger("mod", run_id="r1")
    assert any(isinstance(f, log_mod.RunIdFilter) and f.run_id == "r1" for f in lg.filters)

    lg2 = log_mod.get_logger("mod", run_id="r1")
    assert lg2 is lg
    assert sum(isinstance(f, log_mod.RunIdFilter) and f.run_id == "r1" for f in lg.filters) == 1


def test_run_id_filter_injects_attribute():
    f = log_mod.RunIdFilter(run_id="abc")
    rec = logging.LogRecord(
        name="x",
        level=logging.INFO,
        pathname=__file__,
        lineno=1,
        msg="m",
        args=(),
        exc_info=None,
    )
    assert f.filter(rec) is True
    assert rec.run_id == "abc"


def test_configure_logging_invalid_level_raises():
    with pytest.raises(ValueError):
        log_mod.configure_logging(level="NOT_A_LEVEL", log_file=None)


def test_run_id_reaches_file_lines_from_every_module(tmp_path: Path):
    root = logging.getLogger()
    log_file = tmp_path / "purge.log"
    try:
        log_mod.configure_logging(level="INFO", log_file=str(log_file))
        log_mod.get_logger("satis_purge.core.purge").info("before the run")
        log_mod.get_logger("satis_purge.batch.purge_archives", run_id="r9").info("run started")
        log_mod.get_logger("satis_purge.core.purge").info("x.zip :: deleted")
    finally:
        for h in list(root.handlers):
            if isinstance(h, logging.FileHandler) and Path(h.baseFilename) == log_file.resolve():
                root.removeHandler(h)
                h.close()

    lines = log_file.read_text(encoding="utf-8").splitlines()
    assert lines[0].endswith("| INFO | - | satis_purge.core.purge | before the run")
    assert lines[1].endswith("| INFO | r9 | satis_purge.batch.purge_archives | run started")
    assert lines[2].endswith("| INFO | r9 | satis_purge.core.purge | x.zip :: deleted")
