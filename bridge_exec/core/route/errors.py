"""
Route step errors.

Ordering mistakes and destination checks fail locally; failures from the
Socket API are not defined here and propagate to the caller unchanged.
The destination check error is named so it does not collide with
pydantic.ValidationError raised by the route models.
"""

from typing import Optional


class TransactionStepError(Exception):
    """Base exception for transaction step errors."""
    pass


class SequenceError(TransactionStepError):
    """A step operation was called out of order."""

    def __init__(
        self,
        message: str,
        user_tx_index: Optional[int] = None,
        current_hash: Optional[str] = None,
    ):
        super().__init__(message)
        self.user_tx_index = user_tx_index
        self.current_hash = current_hash


class DestinationValidationError(TransactionStepError):
    """A routed-funds destination is not a known Socket address."""

    def __init__(self, address: Optional[str], chain_id: int):
        super().__init__(f"{address} is not a recognised socket address on chain {chain_id}")
        self.address = address
        self.chain_id = chain_id


class StepCancelledError(TransactionStepError):
    """Status polling was cancelled before the step reached a terminal status."""

    def __init__(self, tx_hash: str):
        super().__init__(f"Status polling for {tx_hash} was cancelled")
        self.tx_hash = tx_hash
