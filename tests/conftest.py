from __future__ import annotations

import pytest
from algosdk import account
from fastapi.testclient import TestClient

from ledger_engine import Ledger


def new_address() -> str:
    _, address = account.generate_account()
    return address


@pytest.fixture()
def admin() -> str:
    return new_address()


@pytest.fixture()
def user1() -> str:
    return new_address()


@pytest.fixture()
def user2() -> str:
    return new_address()


@pytest.fixture()
def ledger(admin: str) -> Ledger:
    return Ledger.create(admin)


@pytest.fixture()
def client(tmp_path, admin: str) -> TestClient:
    from backend import config
    from backend.main import app

    config.configure(tmp_path / "ledger.json", admin)
    return TestClient(app)
