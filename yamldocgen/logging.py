"""Logging setup for the yamldocgen CLI.

Console lines carry the component that emitted them, so a warning about an
undocumented field reads ``[yamldocgen:resolver] WARNING ...``.
"""

from __future__ import annotations

import logging
from pathlib import Path

_LOGGER_NAME = "yamldocgen"
_FILE_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def get_logger(name: str | None = None) -> logging.Logger:
    """Return a logger under the yamldocgen hierarchy."""
    full_name = f"{_LOGGER_NAME}.{name}" if name else _LOGGER_NAME
    return logging.getLogger(full_name)


class ComponentFormatter(logging.Formatter):
    """Prefixes console records with the yamldocgen component that emitted them."""

    def __init__(self) -> None:
        super().__init__("%(levelname)s %(message)s")

    def format(self, record: logging.LogRecord) -> str:
        component = _component(record.name)
        tag = f"{_LOGGER_NAME}:{component}" if component else _LOGGER_NAME
        return f"[{tag}] {super().format(record)}"


def _component(name: str) -> str:
    # "yamldocgen.golang.loader" -> "golang.loader"
    prefix = f"{_LOGGER_NAME}."
    return name[len(prefix):] if name.startswith(prefix) else ""


def configure_logging(
    *, verbose: bool = False, log_file: Path | None = None
) -> logging.Logger:
    """Route yamldocgen records to stderr and, when given, to ``log_file``.

    The file sink always records DEBUG so a run can be diagnosed after the
    fact without rerunning with ``--verbose``.
    """
    level = logging.DEBUG if verbose else logging.INFO
    logger = logging.getLogger(_LOGGER_NAME)
    logger.propagate = False

    # Reconfiguring replaces handlers instead of stacking duplicates.
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    stream_handler = logging.StreamHandler()
    stream_handler.setLevel(level)
    stream_handler.setFormatter(ComponentFormatter())
    logger.addHandler(stream_handler)

    if log_file is not None:
        log_file = Path(log_file)
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(logging.Formatter(_FILE_FORMAT))
        logger.addHandler(file_handler)
        logger.setLevel(logging.DEBUG)
    else:
        logger.setLevel(level)

    return logger


__all__ = ["ComponentFormatter", "configure_logging", "get_logger"]
