"""Route step execution components."""

from .allowlist import SOCKET_ADDRESSES, AddressAllowlist
from .errors import (
    DestinationValidationError,
    SequenceError,
    StepCancelledError,
    TransactionStepError,
)
from .models import (
    Allowance,
    ApprovalData,
    ApprovalTxPayload,
    NextTx,
    RouteStatus,
    SendTxPayload,
    StepState,
    UserTxType,
)
from .step import TransactionStep

__all__ = [
    "SOCKET_ADDRESSES",
    "AddressAllowlist",
    "Allowance",
    "ApprovalData",
    "ApprovalTxPayload",
    "DestinationValidationError",
    "NextTx",
    "RouteStatus",
    "SendTxPayload",
    "SequenceError",
    "StepCancelledError",
    "StepState",
    "TransactionStep",
    "TransactionStepError",
    "UserTxType",
]
