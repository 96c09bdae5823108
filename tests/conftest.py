import pytest

from jsonfetch.config.settings import get_logging_config, get_settings

_SETTINGS_ENV_VARS = (
    "JSONFETCH_CONFIG_PATH",
    "JSONFETCH_ENV_FILE",
    "JSONFETCH_LOG_LEVEL",
    "JSONFETCH_HTTP_TIMEOUT_SECONDS",
    "JSONFETCH_USER_AGENT",
)


@pytest.fixture(autouse=True)
def isolated_settings(monkeypatch):
    # Settings are cached process-wide; every test starts from packaged defaults.
    for key in _SETTINGS_ENV_VARS:
        monkeypatch.delenv(key, raising=False)
    get_settings.cache_clear()
    get_logging_config.cache_clear()
    yield
    get_settings.cache_clear()
    get_logging_config.cache_clear()
