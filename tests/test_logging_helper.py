from pathlib import Path

import pytest

from timerclock.helpers import logging_helper
from timerclock.helpers.config_helper import ConfigHelper


@pytest.fixture
def config_file(tmp_path):
    path = tmp_path / "config.ini"
    ConfigHelper.reset(path)
    try:
        yield path
    finally:
        ConfigHelper.reset(Path("config/config.ini"))
        logging_helper.ensure_logger()


def _enable_logging(config_file: Path, log_dir: Path) -> Path:
    config_file.write_text(
        "[Logging]\n"
        "enabled = true\n"
        f"directory = {log_dir.as_posix()}\n"
        "filename = overlay.log\n"
        "level = DEBUG\n",
        encoding="utf-8",
    )
    ConfigHelper.reset(config_file)
    return log_dir / "overlay.log"


def test_logging_is_disabled_without_config(config_file):
    _, enabled = logging_helper.ensure_logger()

    assert enabled is False
    assert logging_helper.initialize_logging() is False


def test_messages_carry_the_given_function_name(config_file, tmp_path):
    log_path = _enable_logging(config_file, tmp_path / "logs")

    assert logging_helper.initialize_logging() is True
    logging_helper.log_info("countdown started", func_name="CountdownEngine.start")
    logging_helper.log_warning("bad duration", func_name="Coordinator.start_timer")

    content = log_path.read_text(encoding="utf-8")
    assert "| INFO | CountdownEngine.start - countdown started" in content
    assert "| WARNING | Coordinator.start_timer - bad duration" in content


def test_log_function_reraises_and_records_failure(config_file, tmp_path):
    log_path = _enable_logging(config_file, tmp_path / "logs")

    @logging_helper.log_function
    def _explode():
        raise ValueError("nope")

    with pytest.raises(ValueError):
        _explode()

    assert "failed: nope" in log_path.read_text(encoding="utf-8")
