"""Shared fixtures for cdda_harvest tests."""

import logging
from typing import Iterator

import pytest

from cdda_harvest.utils.logging_config import NOISY_LOGGERS, PROJECT_LOGGER
from samples import game_tree, make_zipball


@pytest.fixture
def zipball() -> bytes:
    return make_zipball(game_tree())


@pytest.fixture
def game_dir(tmp_path):
    root = tmp_path / "game"
    for name, text in game_tree().items():
        path = root / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text, encoding="utf-8")
    return root


@pytest.fixture
def restore_logging() -> Iterator[None]:
    """Restore root logger handlers replaced by ``setup_logging``."""
    root_logger = logging.getLogger()
    handlers = list(root_logger.handlers)
    level = root_logger.level
    named = [PROJECT_LOGGER, *NOISY_LOGGERS]
    named_levels = {name: logging.getLogger(name).level for name in named}
    yield
    for handler in root_logger.handlers:
        if handler not in handlers:
            handler.close()
    root_logger.handlers[:] = handlers
    root_logger.setLevel(level)
    for name, named_level in named_levels.items():
        logging.getLogger(name).setLevel(named_level)
