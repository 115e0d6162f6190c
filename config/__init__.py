import importlib
import os
from types import ModuleType

_MODULE_BY_ENV = {
    "prod": "config.production",
    "production": "config.production",
    "test": "config.testing",
    "testing": "config.testing",
    "dev": "config.development",
    "development": "config.development",
}


def get_settings_module() -> str:
    """Settings module for the running deployment.

    ``PRESENCE_SETTINGS_MODULE`` names a module explicitly (e.g. a site-specific
    file next to a reader installation); otherwise ``APP_ENV`` picks one of the
    bundled modules and anything unknown falls back to development.
    """
    explicit = os.getenv("PRESENCE_SETTINGS_MODULE", "").strip()
    if explicit:
        return explicit
    env = os.getenv("APP_ENV", "development").strip().lower()
    return _MODULE_BY_ENV.get(env, "config.development")


def load_settings() -> ModuleType:
    return importlib.import_module(get_settings_module())
