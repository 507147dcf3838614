"""Typed models for a single route step returned by the Socket planning API."""

from __future__ import annotations

from enum import Enum
from typing import Any, Dict, Optional, Union

from pydantic import BaseModel, Field, field_validator


class UserTxType(str, Enum):
    """Category of an on-chain transaction inside a route."""

    FUND_MOVR = "fund-movr"  # funds routed through the Socket registry
    DEX_SWAP = "dex-swap"
    CLAIM = "claim"
    SIGN = "sign"


class RouteStatus(str, Enum):
    """Status of an active route step as reported by ``/route/prepare``."""

    PENDING = "PENDING"
    COMPLETED = "COMPLETED"
    FAILED = "FAILED"
    REVERTED = "REVERTED"


class StepState(str, Enum):
    """Local lifecycle of a transaction step."""

    UNSUBMITTED = "unsubmitted"
    PENDING = "pending"
    TERMINAL = "terminal"


class ApprovalData(BaseModel):
    """ERC-20 approval that may be needed before the send transaction."""

    owner: str
    allowance_target: str = Field(..., alias="allowanceTarget")
    approval_token_address: str = Field(..., alias="approvalTokenAddress")
    minimum_approval_amount: str = Field(
        ..., alias="minimumApprovalAmount", description="Unsigned integer as a decimal string"
    )

    class Config:
        populate_by_name = True
        frozen = True


class NextTx(BaseModel):
    """Immutable planning snapshot for one step of an active route."""

    chain_id: int = Field(..., alias="chainId")
    user_tx_type: Union[UserTxType, str] = Field(..., alias="userTxType")
    tx_target: str = Field(..., alias="txTarget")
    tx_data: str = Field(..., alias="txData")
    value: str = Field("0x00", description="Native value to send (hex or decimal string)")
    approval_data: Optional[ApprovalData] = Field(None, alias="approvalData")
    active_route_id: int = Field(..., alias="activeRouteId")
    user_tx_index: int = Field(..., alias="userTxIndex")
    tx_type: Optional[str] = Field(None, alias="txType")
    total_user_tx: Optional[int] = Field(None, alias="totalUserTx")

    @field_validator("user_tx_type", mode="before")
    @classmethod
    def _known_tx_type(cls, value: Any) -> Any:
        try:
            return UserTxType(value)
        except ValueError:
            return value

    @field_validator("value", mode="before")
    @classmethod
    def _value_as_str(cls, value: Any) -> Any:
        if isinstance(value, int):
            return hex(value)
        return value

    class Config:
        populate_by_name = True
        frozen = True

    @property
    def is_fund_movr(self) -> bool:
        return self.user_tx_type == UserTxType.FUND_MOVR


class SendTxPayload(BaseModel):
    """Transaction the caller signs and broadcasts for this step."""

    to: str
    data: str
    value: str

    class Config:
        frozen = True

    def to_dict(self) -> Dict[str, Any]:
        return {"to": self.to, "data": self.data, "value": self.value}


class ApprovalTxPayload(BaseModel):
    """Approval transaction built by ``/approval/build-tx``."""

    to: str
    data: str
    from_: Optional[str] = Field(None, alias="from")
    value: str = "0x00"

    class Config:
        populate_by_name = True
        frozen = True

    def to_dict(self) -> Dict[str, Any]:
        tx = {"to": self.to, "data": self.data, "value": self.value}
        if self.from_:
            tx["from"] = self.from_
        return tx


class Allowance(BaseModel):
    """Current allowance granted by an owner to a spender."""

    value: str = Field(..., description="Unsigned integer as a decimal string")
    token_address: Optional[str] = Field(None, alias="tokenAddress")

    class Config:
        populate_by_name = True
        frozen = True

    @property
    def amount(self) -> int:
        return int(self.value)
