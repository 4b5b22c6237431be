from __future__ import annotations

import logging
from pathlib import Path

import pytest

from tests._fixtures.go_module_builder import GoModuleBuilder


@pytest.fixture
def go_module(tmp_path: Path) -> GoModuleBuilder:
    """Provide a reusable Go module builder rooted at the pytest tmp_path."""
    return GoModuleBuilder(tmp_path)


@pytest.fixture(autouse=True)
def _reset_yamldocgen_logger():
    """Undo configure_logging so caplog keeps seeing yamldocgen records."""
    logger = logging.getLogger("yamldocgen")
    yield
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.propagate = True
    logger.setLevel(logging.NOTSET)
