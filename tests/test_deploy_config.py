from __future__ import annotations

import pytest

from smart_contracts.learnopoly import deploy_config


@pytest.fixture(autouse=True)
def no_sleep(monkeypatch) -> None:
    monkeypatch.setattr(deploy_config.time, "sleep", lambda _seconds: None)


def test_txn_dead_detection() -> None:
    assert deploy_config._is_txn_dead(Exception("TransactionPool.Remember: txn dead: round 10 outside of 11--20"))
    assert deploy_config._is_txn_dead(Exception("Round outside of validity window"))
    assert not deploy_config._is_txn_dead(Exception("logic eval error: assert failed"))


def test_retries_transient_failures() -> None:
    calls = []

    def flaky():
        calls.append(1)
        if len(calls) < deploy_config.MAX_RETRIES:
            raise RuntimeError("txn dead")
        return "ok"

    assert deploy_config._with_retries("Deploy", flaky) == "ok"
    assert len(calls) == deploy_config.MAX_RETRIES


def test_gives_up_after_max_retries() -> None:
    calls = []

    def always_dead():
        calls.append(1)
        raise RuntimeError("txn dead")

    with pytest.raises(RuntimeError, match="txn dead"):
        deploy_config._with_retries("Deploy", always_dead)
    assert len(calls) == deploy_config.MAX_RETRIES


def test_other_errors_are_not_retried() -> None:
    calls = []

    def broken():
        calls.append(1)
        raise ValueError("logic eval error")

    with pytest.raises(ValueError):
        deploy_config._with_retries("Funding", broken)
    assert len(calls) == 1
