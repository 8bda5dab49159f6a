from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Any, Optional

from ..utils import now_ms


class TxState(str, enum.Enum):
    CREATED = "created"
    SUCCESS = "success"
    FAILED = "failed"


class ConfirmationOutcome(str, enum.Enum):
    CONFIRMED = "confirmed"
    FAILED = "failed"
    UNKNOWN = "unknown"


@dataclass
class TxStatus:
    """
    Caller-visible outcome of one submitted transaction.

    The hash is fixed at creation. The state starts as ``created`` and only
    moves to ``failed`` when the node rejects the submission, or to
    ``success`` when a caller records a confirmation.
    """
    tx_hash: str
    state: TxState = TxState.CREATED
    time_create: int = field(default_factory=now_ms)
    time_final: Optional[int] = None
    result: Any = None

    @property
    def id(self) -> str:
        return self.tx_hash

    @property
    def failed(self) -> bool:
        return self.state is TxState.FAILED

    def set_status_fail(self, result: Any = None) -> None:
        self.state = TxState.FAILED
        self.result = result
        self.time_final = now_ms()

    def set_status_success(self, result: Any = None) -> None:
        self.state = TxState.SUCCESS
        self.result = result
        self.time_final = now_ms()

    def to_dict(self) -> dict[str, Any]:
        return {
            "tx_hash": self.tx_hash,
            "status": self.state.value,
            "time_create": self.time_create,
            "time_final": self.time_final,
            "result": self.result,
        }
