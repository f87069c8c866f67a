"""Shared fixtures for mdconvert tests."""

import logging

import pytest
from mdconvert.conversion import native, selector
from mdconvert.models import config as config_module


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    """Isolate tests from MDCONVERT_* variables and process-wide state."""
    for name in (
        config_module.ENV_USE_NATIVE,
        config_module.ENV_NATIVE_LIBRARY,
        config_module.ENV_NATIVE_TIMEOUT,
        config_module.ENV_LINK_STYLE,
    ):
        monkeypatch.delenv(name, raising=False)

    config_module.get_config.cache_clear()
    native._loaders.clear()
    selector._service = None

    yield

    config_module.get_config.cache_clear()
    native._loaders.clear()
    selector._service = None

    # setup_logging() turns propagation off, which hides records from caplog
    package_logger = logging.getLogger("mdconvert")
    package_logger.handlers.clear()
    package_logger.propagate = True
    package_logger.setLevel(logging.NOTSET)
