"""Global test configuration for the UiPath adapter."""

import os

import pytest


@pytest.fixture(autouse=True, scope="session")
def _set_test_env_vars():
    """Set dummy environment variables for Settings validation.

    Only sets values that aren't already present, so real env vars take
    precedence.
    """
    defaults = {
        "UIPATH_URL": "https://cloud.uipath.com/acme",
        "UIPATH_CLIENT_ID": "test-client-id",
        "UIPATH_CLIENT_SECRET": "test-client-secret",
        "UIPATH_TENANT_NAME": "DefaultTenant",
    }
    originals = {}
    for key, value in defaults.items():
        if key not in os.environ:
            os.environ[key] = value
            originals[key] = None
        else:
            originals[key] = os.environ[key]

    # Clear the lru_cache on get_settings so it picks up the new env vars
    from uipath_mcp.config import get_settings
    get_settings.cache_clear()

    yield

    for key, original in originals.items():
        if original is None:
            os.environ.pop(key, None)
        else:
            os.environ[key] = original
    get_settings.cache_clear()
