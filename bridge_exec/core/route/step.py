"""
Transaction step

One object per on-chain transaction in an active Socket route. Owns the
approval check, the approval/send transaction builds, the write-once hash
submission and the status polling loop for that transaction.
"""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING, Any, Awaitable, Callable, Dict, Optional, TypeVar, Union

from ...config import settings
from ...logging_config import route_step_context
from .allowlist import AddressAllowlist
from .errors import DestinationValidationError, SequenceError, StepCancelledError
from .models import (
    ApprovalData,
    ApprovalTxPayload,
    NextTx,
    RouteStatus,
    SendTxPayload,
    StepState,
    UserTxType,
)

if TYPE_CHECKING:  # pragma: no cover
    from ...providers.base import BridgeAPI


logger = logging.getLogger(__name__)

DEFAULT_STATUS_CHECK_INTERVAL_MS = 10000

Sleeper = Callable[[float], Awaitable[Any]]
T = TypeVar("T")


def _coerce_status(value: Any) -> Union[RouteStatus, str]:
    try:
        return RouteStatus(value)
    except ValueError:
        return value


class TransactionStep:
    """
    A transaction prompted by the Socket API for one step of a route.

    Lifecycle:
    - approval_required() / get_approve_transaction() evaluate the approval
    - get_send_transaction() builds the transaction once approval was evaluated
    - submit(hash) records the hash once and polls until a terminal status
    """

    def __init__(
        self,
        next_tx: NextTx,
        api: "BridgeAPI",
        *,
        allowlist: Optional[AddressAllowlist] = None,
        status_check_interval: int = DEFAULT_STATUS_CHECK_INTERVAL_MS,
        sleep: Optional[Sleeper] = None,
    ):
        """
        Args:
            next_tx: Planning snapshot for this step
            api: Client used for allowance, approval and status calls
            allowlist: Known destinations for routed-funds transactions
            status_check_interval: How often in ms to poll for status updates
            sleep: Coroutine function used to wait between polls (seconds)
        """
        self.tx = next_tx
        self.api = api
        self.allowlist = allowlist or AddressAllowlist.default()
        self.status_check_interval = status_check_interval
        self._sleep = sleep or asyncio.sleep

        self.approval_checked = False
        self.status: Optional[Union[RouteStatus, str]] = None
        self._hash: Optional[str] = None
        self._done = False

    @classmethod
    def from_api(
        cls,
        payload: Dict[str, Any],
        api: "BridgeAPI",
        *,
        allowlist: Optional[AddressAllowlist] = None,
        status_check_interval: Optional[int] = None,
        sleep: Optional[Sleeper] = None,
    ) -> "TransactionStep":
        """Build a step from the raw ``nextTx`` object returned by the planning API."""
        interval = status_check_interval
        if interval is None:
            interval = settings.status_check_interval_ms
        return cls(
            NextTx.model_validate(payload),
            api,
            allowlist=allowlist,
            status_check_interval=interval,
            sleep=sleep,
        )

    # ─────────────────────────────────────────────────────────────────────────
    # Snapshot accessors
    # ─────────────────────────────────────────────────────────────────────────

    @property
    def chain_id(self) -> int:
        return self.tx.chain_id

    @property
    def user_tx_type(self) -> Union[UserTxType, str]:
        return self.tx.user_tx_type

    @property
    def user_tx_index(self) -> int:
        return self.tx.user_tx_index

    @property
    def active_route_id(self) -> int:
        return self.tx.active_route_id

    @property
    def tx_type_label(self) -> str:
        return getattr(self.user_tx_type, "value", self.user_tx_type)

    @property
    def approval_data(self) -> Optional[ApprovalData]:
        return self.tx.approval_data

    @property
    def hash(self) -> Optional[str]:
        """Hash associated with this step; set once by submit()."""
        return self._hash

    @property
    def done(self) -> bool:
        return self._done

    @property
    def state(self) -> StepState:
        if self._done:
            return StepState.TERMINAL
        if self._hash is None:
            return StepState.UNSUBMITTED
        return StepState.PENDING

    # ─────────────────────────────────────────────────────────────────────────
    # Approval
    # ─────────────────────────────────────────────────────────────────────────

    async def approval_required(self) -> bool:
        """Whether an approval transaction is required before sending."""
        self.approval_checked = True
        approval = self.approval_data
        if approval is None:
            return False

        allowance = await self.api.fetch_allowance(
            chain_id=self.chain_id,
            owner=approval.owner,
            allowance_target=approval.allowance_target,
            token_address=approval.approval_token_address,
        )
        required = allowance.amount < int(approval.minimum_approval_amount)
        logger.debug(
            "Step %s allowance=%s minimum=%s approval_required=%s",
            self.user_tx_index,
            allowance.value,
            approval.minimum_approval_amount,
            required,
        )
        return required

    async def get_approve_transaction(self) -> Optional[ApprovalTxPayload]:
        """Approval transaction to execute first, or None when not required."""
        if not await self.approval_required():
            return None

        approval = self.approval_data
        if approval is None:
            return None

        return await self.api.fetch_approval_calldata(
            chain_id=self.chain_id,
            allowance_target=approval.allowance_target,
            amount=approval.minimum_approval_amount,
            owner=approval.owner,
            token_address=approval.approval_token_address,
        )

    # ─────────────────────────────────────────────────────────────────────────
    # Send
    # ─────────────────────────────────────────────────────────────────────────

    def validate_send(self, candidate: SendTxPayload) -> None:
        if self.tx.is_fund_movr and not self.allowlist.contains(self.chain_id, candidate.to):
            raise DestinationValidationError(candidate.to, self.chain_id)

    def get_send_transaction(self) -> SendTxPayload:
        if not self.approval_checked:
            raise SequenceError(
                "Approval not checked. Check `get_approve_transaction` before attempting to send.",
                user_tx_index=self.user_tx_index,
            )

        tx = SendTxPayload(to=self.tx.tx_target, data=self.tx.tx_data, value=self.tx.value)
        self.validate_send(tx)
        return tx

    # ─────────────────────────────────────────────────────────────────────────
    # Submit + status polling
    # ─────────────────────────────────────────────────────────────────────────

    async def submit(
        self,
        tx_hash: str,
        *,
        cancel_event: Optional[asyncio.Event] = None,
    ) -> Union[RouteStatus, str]:
        """
        Submit the hash for this step and wait until the route reports it finished.

        Args:
            tx_hash: The hash for this transaction on the network
            cancel_event: Setting this event aborts the wait and any in-flight
                status query with StepCancelledError

        Returns:
            The first non-PENDING status reported by the API

        Raises:
            SequenceError: If a hash was already submitted for this step
        """
        if self._hash is not None:
            raise SequenceError(
                f"The transaction step {self.user_tx_index}: {self.tx_type_label} "
                f"has hash already set to {self._hash}",
                user_tx_index=self.user_tx_index,
                current_hash=self._hash,
            )
        self._hash = tx_hash

        with route_step_context(
            active_route_id=self.active_route_id,
            user_tx_index=self.user_tx_index,
            chain_id=self.chain_id,
            tx_hash=tx_hash,
        ):
            logger.info("Submitted step %s of route %s", self.user_tx_index, self.active_route_id)
            return await self._poll(tx_hash, cancel_event)

    async def _poll(
        self,
        tx_hash: str,
        cancel_event: Optional[asyncio.Event],
    ) -> Union[RouteStatus, str]:
        while True:
            status = _coerce_status(
                await self._interruptible(
                    self.api.update_active_route(
                        active_route_id=self.active_route_id,
                        user_tx_index=self.user_tx_index,
                        tx_hash=tx_hash,
                    ),
                    cancel_event,
                )
            )
            self.status = status

            if status != RouteStatus.PENDING:
                self._done = True
                logger.info("Step %s finished with status %s", self.user_tx_index, status)
                return status

            logger.debug(
                "Step %s pending; checking again in %sms",
                self.user_tx_index,
                self.status_check_interval,
            )
            await self._interruptible(self._sleep(self.status_check_interval / 1000), cancel_event)

    async def _interruptible(self, awaitable: Awaitable[T], cancel_event: Optional[asyncio.Event]) -> T:
        """Await `awaitable`, aborting it if `cancel_event` fires first."""
        if cancel_event is None:
            return await awaitable

        if cancel_event.is_set():
            if asyncio.iscoroutine(awaitable):
                awaitable.close()
            raise StepCancelledError(self._hash or "")

        work = asyncio.ensure_future(awaitable)
        cancelled = asyncio.ensure_future(cancel_event.wait())
        try:
            await asyncio.wait({work, cancelled}, return_when=asyncio.FIRST_COMPLETED)
        finally:
            pending = [task for task in (work, cancelled) if not task.done()]
            for task in pending:
                task.cancel()
            if pending:
                await asyncio.gather(*pending, return_exceptions=True)

        if work.done() and not work.cancelled():
            return work.result()
        raise StepCancelledError(self._hash or "")

    def __repr__(self) -> str:
        return (
            f"TransactionStep(route={self.active_route_id}, index={self.user_tx_index}, "
            f"type={self.tx_type_label}, state={self.state.value})"
        )
