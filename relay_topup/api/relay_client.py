from better_proxy import Proxy

from configs import RELAY_API_URL, REQUEST_TIMEOUT
from relay_topup.api.base_client import BaseAPIClient
from relay_topup.exceptions.api_exceptions import APIRetryExhaustedError
from relay_topup.exceptions.custom_exceptions import BridgeUnavailable
from relay_topup.models.pipeline import BridgeQuote
from relay_topup.utils.retry import RetryPolicy


class RelayClient(BaseAPIClient):
    """Quote and transaction builder of https://relay.link"""

    def __init__(
        self,
        proxy: Proxy | None = None,
        retry_policy: RetryPolicy | None = None,
        timeout: float = REQUEST_TIMEOUT
    ) -> None:
        super().__init__(base_url=RELAY_API_URL, proxy=proxy)
        self.retry_policy = retry_policy or RetryPolicy()
        self.timeout = timeout

    async def get_tx_details(
        self,
        user: str,
        origin_chain_id: int,
        destination_chain_id: int,
        amount_wei: int,
        currency: str = "eth"
    ) -> BridgeQuote:
        body = {
            "user": user,
            "originChainId": origin_chain_id,
            "destinationChainId": destination_chain_id,
            "currency": currency,
            "recipient": user,
            "amount": str(amount_wei),
            "usePermit": False,
            "useExternalLiquidity": False,
            "source": "relay.link"
        }

        try:
            response = await self.send_request(
                request_type="POST",
                method="/execute/bridge",
                json_data=body,
                retry_policy=self.retry_policy,
                timeout=self.timeout
            )
        except APIRetryExhaustedError as error:
            raise BridgeUnavailable(
                f"Totally failed to get tx details from Relay API after {error.attempts} attempts: {error.last_error}"
            ) from error

        if not isinstance(response.data, dict):
            raise BridgeUnavailable(f"Relay API returned a non-JSON body: {response.text[:200]}")

        return BridgeQuote.from_response(response.data)
