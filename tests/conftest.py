import os
import sys

import pytest
from fastapi.testclient import TestClient

sys.path.insert(0, os.path.dirname(os.path.dirname(__file__)))
import config
import main


@pytest.fixture
def settings():
    return config.Settings(
        merchant_id="10000100",
        merchant_key="46f0cd694581a",
        passphrase="jt7NOE43FZPn",
        public_base_url="https://donations.example.org",
        itn_validate=False,
    )


@pytest.fixture
def client(settings):
    return TestClient(main.create_app(settings))
