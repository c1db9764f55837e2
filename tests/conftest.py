from __future__ import annotations

import logging

import pytest

from tests._fixtures.document_builder import DocumentBuilder, button_document


@pytest.fixture(autouse=True)
def _reset_compdoc_logging():
    """Drop handlers the CLI installs so they never outlive captured streams."""
    yield
    logger = logging.getLogger("compdoc")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    logger.propagate = True
    logger.setLevel(logging.NOTSET)


@pytest.fixture
def document_builder() -> DocumentBuilder:
    """Provide an empty design file with a single page."""
    return DocumentBuilder()


@pytest.fixture
def button_builder() -> DocumentBuilder:
    """Provide a design file holding the Button component set and its icons."""
    return button_document()
