from abc import ABC, abstractmethod

from ..core.route.models import Allowance, ApprovalTxPayload


class BridgeAPI(ABC):
    """Remote operations a transaction step needs from the bridging API"""

    name: str
    timeout_s: int = 20

    @abstractmethod
    async def fetch_allowance(
        self,
        chain_id: int,
        owner: str,
        allowance_target: str,
        token_address: str,
    ) -> Allowance:
        """Current allowance of `token_address` granted by `owner` to `allowance_target`"""
        pass

    @abstractmethod
    async def fetch_approval_calldata(
        self,
        chain_id: int,
        allowance_target: str,
        amount: str,
        owner: str,
        token_address: str,
    ) -> ApprovalTxPayload:
        """Build the approval transaction for `amount` of `token_address`"""
        pass

    @abstractmethod
    async def update_active_route(
        self,
        active_route_id: int,
        user_tx_index: int,
        tx_hash: str,
    ) -> str:
        """Report the hash for a route step and return the step's current status"""
        pass
