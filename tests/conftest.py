from __future__ import annotations

import os
import tempfile
from pathlib import Path

import pytest


_TEST_ROOT = Path(tempfile.mkdtemp(prefix="referral_test_"))

# Module-level ``referral_api.main.app`` reads settings at import time.
os.environ["REFERRAL_DB_URL"] = f"sqlite:///{_TEST_ROOT / 'referral_default.db'}"
os.environ["REFERRAL_LOG_JSON"] = "false"


@pytest.fixture()
def settings(tmp_path: Path):
    from referral_api.core.config import Settings

    return Settings(db_url=f"sqlite:///{tmp_path / 'referrals.db'}")


@pytest.fixture()
def broken_settings(tmp_path: Path):
    from referral_api.core.config import Settings

    # Parent directory does not exist, so SQLite cannot open the file.
    return Settings(db_url=f"sqlite:///{tmp_path / 'missing' / 'dir' / 'referrals.db'}")


@pytest.fixture()
def store(settings):
    from referral_api.db import make_engine
    from referral_api.store import ReferralStore

    s = ReferralStore(make_engine(settings))
    assert s.ensure_schema().ok
    yield s
    s.engine.dispose()


@pytest.fixture()
def api_client(settings):
    from fastapi.testclient import TestClient

    from referral_api.main import create_app

    app = create_app(settings=settings)
    with TestClient(app) as client:
        yield client
    app.state.store.engine.dispose()


@pytest.fixture()
def broken_api_client(broken_settings):
    from fastapi.testclient import TestClient

    from referral_api.main import create_app

    app = create_app(settings=broken_settings)
    with TestClient(app) as client:
        yield client
    app.state.store.engine.dispose()
