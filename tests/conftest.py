"""Root test configuration: keep user environment out of the test session"""

import os

import pytest


@pytest.fixture(autouse=True)
def isolate_env(monkeypatch):
    """Drop MDREGEN_* variables so each test sees only the settings it sets."""
    for name in list(os.environ):
        if name.startswith("MDREGEN_"):
            monkeypatch.delenv(name)
