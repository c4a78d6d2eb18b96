"""
Root conftest.py for instrument-search.

Configures structured logging once for the whole test session so log calls
made by the package render to the captured output.
"""

from instrument_search.config import Settings
from instrument_search.logging_config import configure_logging


def pytest_configure(config):
    """
    Configure console logging at DEBUG for tests.

    Settings are built explicitly so a developer's .env can't change
    test output.
    """
    configure_logging(Settings(LOG_LEVEL="DEBUG", LOG_FORMAT="console", _env_file=None))
