import os
import sys

import pytest

sys.path.insert(0, os.path.dirname(os.path.dirname(__file__)))
import config


@pytest.fixture(autouse=True)
def simplepay_credentials(monkeypatch):
    monkeypatch.setattr(config, "SIMPLEPAY_AWS_ACCESS_KEY_ID", "AKIDEXAMPLE")
    monkeypatch.setattr(config, "SIMPLEPAY_AWS_SECRET_ACCESS_KEY", "secret-key")
    monkeypatch.setattr(config, "SIMPLEPAY_ACCOUNT_ID", "ACCOUNT123")
    monkeypatch.setattr(config, "SIMPLEPAY_USE_SANDBOX", False)
    monkeypatch.setattr(config, "SIMPLEPAY_TIMEZONE", "UTC")
