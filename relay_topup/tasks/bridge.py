from decimal import Decimal

from web3 import Web3

from configs import RELAY_ADDRESS
from relay_topup.api.relay_client import RelayClient
from relay_topup.exceptions.custom_exceptions import (
    FeeTooHigh,
    NetworkMismatch,
    UnexpectedTarget,
    UnsupportedChain,
)
from relay_topup.logger import AsyncLogger
from relay_topup.models.chains import CHAINS
from relay_topup.models.pipeline import BridgeQuote
from relay_topup.models.protocols import ChainAccessor


class RelayBridge(AsyncLogger):
    """Bridges native ETH between chains through Relay (https://relay.link)."""

    def __init__(
        self,
        signer: ChainAccessor,
        address: str,
        out_chain_name: str,
        in_chain_name: str,
        relay_client: RelayClient,
        account_name: str | None = None
    ) -> None:
        super().__init__()
        self.signer = signer
        self.address = address
        self.out_chain_name = out_chain_name
        self.in_chain_name = in_chain_name
        self.relay_client = relay_client
        self.account_name = account_name

    async def _log(self, msg: str, type_msg: str = "debug") -> None:
        await self.logger_msg(
            msg=msg, type_msg=type_msg, account_name=self.account_name,
            address=self.address, method_name="perform_eth_relay"
        )

    @staticmethod
    def validate_quote(quote: BridgeQuote, max_relayer_fee_eth: float) -> Decimal:
        target = str(quote.transaction_payload.get("to", ""))
        if target.lower() != RELAY_ADDRESS.lower():
            raise UnexpectedTarget(f"Unexpected relay address: {target}")

        relayer_fee_eth = Web3.from_wei(quote.relayer_fee_wei, "ether")
        if relayer_fee_eth > Decimal(str(max_relayer_fee_eth)):
            raise FeeTooHigh(
                f"Relayer fee ({relayer_fee_eth}) exceeds user limit ({max_relayer_fee_eth})"
            )
        return relayer_fee_eth

    async def perform_eth_relay(self, amount_eth: Decimal, max_relayer_fee_eth: float) -> str:
        out_chain = CHAINS[self.out_chain_name]
        in_chain = CHAINS[self.in_chain_name]

        if not out_chain.cex_withdraw_supported:
            raise UnsupportedChain(f"{out_chain.name} is not supported as a top-up chain")

        await self._log("performing relay")
        amount_wei = Web3.to_wei(amount_eth, "ether")

        provider_chain_id = await self.signer.get_network_id()
        if provider_chain_id != out_chain.id:
            raise NetworkMismatch(
                f"Provider chain id {provider_chain_id}, out chain id {out_chain.id}"
            )

        quote = await self.relay_client.get_tx_details(
            user=self.address,
            origin_chain_id=out_chain.id,
            destination_chain_id=in_chain.id,
            amount_wei=amount_wei,
            currency="eth"
        )
        await self._log(f"tx data: {quote.transaction_payload}, status: {quote.status_check_endpoint}")

        relayer_fee_eth = self.validate_quote(quote, max_relayer_fee_eth)
        await self._log(f"relayerFeeEth: {relayer_fee_eth}, maxRelayerFeeEth: {max_relayer_fee_eth}")

        return await self.signer.send_transaction(quote.transaction_payload)
