"""Deploy configuration for the Learnopoly smart contract.

Targets whatever network the algokit environment points at (LocalNet or
TestNet via public nodes). The deploying account becomes the application
creator and therefore the ledger administrator.
"""

import logging
import time

import algokit_utils
from algokit_utils.models.transaction import SendParams

logger = logging.getLogger(__name__)

MAX_RETRIES = 3
RETRY_DELAY_SECONDS = 5
BOX_MBR_FUNDING_ALGO = 1


def _is_txn_dead(exc: Exception) -> bool:
    msg = str(exc).lower()
    return "txn dead" in msg or "round outside of" in msg


def _with_retries(action: str, fn):
    """Run ``fn`` and retry transient 'txn dead' failures."""
    for attempt in range(1, MAX_RETRIES + 1):
        try:
            return fn()
        except Exception as exc:
            if _is_txn_dead(exc) and attempt < MAX_RETRIES:
                logger.warning(
                    f"{action} attempt {attempt} hit 'txn dead' — "
                    f"retrying in {RETRY_DELAY_SECONDS}s…\n  {exc}"
                )
                time.sleep(RETRY_DELAY_SECONDS)
            else:
                logger.error(f"{action} failed: {exc}")
                raise
    raise RuntimeError(f"{action} did not run")


def deploy() -> None:
    """Deploy the Learnopoly ledger and fund it for Box storage."""

    from smart_contracts.artifacts.learnopoly.learnopoly_client import (
        LearnopolyFactory,
    )

    # ── Client setup ─────────────────────────────────────────────────
    algorand = algokit_utils.AlgorandClient.from_environment()
    algorand.set_default_validity_window(1000)

    deployer_ = algorand.account.from_environment("DEPLOYER")
    logger.info(f"Deployer (administrator) address: {deployer_.address}")

    factory = algorand.client.get_typed_app_factory(
        LearnopolyFactory, default_sender=deployer_.address
    )

    send_params = SendParams(
        max_rounds_to_wait=1000,
        populate_app_call_resources=True,
    )

    # ── Deploy ───────────────────────────────────────────────────────
    app_client, result = _with_retries(
        "Deploy",
        lambda: factory.deploy(
            on_update=algokit_utils.OnUpdate.AppendApp,
            on_schema_break=algokit_utils.OnSchemaBreak.AppendApp,
            send_params=send_params,
        ),
    )
    logger.info(f"Deploy succeeded: {app_client.app_name} (app_id={app_client.app_id})")

    # ── Fund app for Box MBR ─────────────────────────────────────────
    if result.operation_performed in [
        algokit_utils.OperationPerformed.Create,
        algokit_utils.OperationPerformed.Replace,
    ]:
        logger.info(
            f"Funding app {app_client.app_id} with {BOX_MBR_FUNDING_ALGO} ALGO for Box MBR…"
        )
        _with_retries(
            "Funding",
            lambda: algorand.send.payment(
                algokit_utils.PaymentParams(
                    amount=algokit_utils.AlgoAmount(algo=BOX_MBR_FUNDING_ALGO),
                    sender=deployer_.address,
                    receiver=app_client.app_address,
                    validity_window=1000,
                ),
                send_params=send_params,
            ),
        )
        logger.info("Funding confirmed.")

    logger.info(
        f"✅ Deployed {app_client.app_name} (app_id={app_client.app_id}) "
        f"at {app_client.app_address}"
    )
