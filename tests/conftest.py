"""
Global pytest configuration and fixtures for CareBase platform tests.
"""

import os

import pytest

# Console log output during test runs
os.environ.setdefault("OBSERVABILITY__LOG_FORMAT", "text")


@pytest.fixture(autouse=True)
def reset_global_config():
    """Reset cached settings and billing config between tests."""
    from carebase.platform.billing.config import set_billing_config
    from carebase.platform.settings import reset_settings

    reset_settings()
    set_billing_config(None)
    yield
    reset_settings()
    set_billing_config(None)
