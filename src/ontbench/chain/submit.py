"""
Submission Client - Hand signed transactions to the transport.

One network round trip per call; no retries. A rejected submission is
reported through the returned status, not raised. Transport failures
(``TransportError``) propagate to the caller.
"""

from __future__ import annotations

import logging

from .rpc import Transport
from .status import TxStatus
from .tx import Transaction

log = logging.getLogger("ontbench.submit")


async def submit_raw(transport: Transport, tx_hash: str, serialized_tx: str) -> TxStatus:
    """Post an already-serialized transaction under a caller-supplied hash."""
    status = TxStatus(tx_hash)
    result = await transport.submit(serialized_tx)
    if result < 0:
        status.set_status_fail(result)
        log.warning("tx %s failed: %s", tx_hash, result)
    else:
        log.debug("sendtx %s", tx_hash)
    return status


async def submit_transaction(transport: Transport, tx: Transaction) -> TxStatus:
    """Serialize a signed transaction and submit it."""
    return await submit_raw(transport, tx.tx_hash, tx.serialize())
