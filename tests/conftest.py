"""Root test configuration: isolation from the developer's config and environment"""

import logging

import pytest

from chatmark.config import ENV_PREFIX, Settings
from chatmark.core.utils.logger import ROOT_LOGGER


@pytest.fixture(name="isolated")
def isolated_fixture(tmp_path, monkeypatch):
    """Run in an empty directory with no CHATMARK_* variables set."""
    monkeypatch.chdir(tmp_path)
    for name in Settings.model_fields:
        monkeypatch.delenv(f"{ENV_PREFIX}{name.upper()}", raising=False)
    return tmp_path


@pytest.fixture(autouse=True)
def reset_chatmark_logging():
    """Drop handlers configure_logging attached so none outlives the stream it was bound to."""
    root = logging.getLogger(ROOT_LOGGER)
    yield
    for handler in list(root.handlers):
        root.removeHandler(handler)
    root.setLevel(logging.NOTSET)
