import json
from decimal import Decimal
from typing import Self

import ccxt.async_support as ccxt

from relay_topup.exceptions.custom_exceptions import ExchangeWithdrawalFailed, UnsupportedChain
from relay_topup.logger import AsyncLogger
from relay_topup.models.chains import CHAINS


UNSUPPORTED_WITHDRAW_NETWORKS = frozenset(
    chain.binance_network for chain in CHAINS.values() if not chain.cex_withdraw_supported
)


class BinanceClient(AsyncLogger):
    def __init__(self, api_key: str, secret: str, exchange: ccxt.Exchange | None = None) -> None:
        super().__init__()
        self.exchange = exchange or ccxt.binance({
            "apiKey": api_key,
            "secret": secret,
            "enableRateLimit": False,
            "options": {"defaultType": "spot"},
        })

    async def __aenter__(self) -> Self:
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()

    async def close(self) -> None:
        await self.exchange.close()

    async def get_withdraw_fee(self, coin: str, network: str) -> float:
        fees = await self.exchange.fetch_deposit_withdraw_fees([coin])
        return fees[coin]["networks"][network]["withdraw"]["fee"]

    async def withdraw(self, address: str, coin: str, network: str, amount: Decimal) -> str:
        await self.logger_msg(
            msg=f"address: {address}, coin: {coin}, network: {network}, amount: {amount}",
            type_msg="debug", method_name="withdraw"
        )

        if network in UNSUPPORTED_WITHDRAW_NETWORKS:
            raise UnsupportedChain(f"{network} is not supported by Binance for withdrawal")

        fee = await self.get_withdraw_fee(coin, network)
        await self.logger_msg(msg=f"fee: {fee}", type_msg="debug", method_name="withdraw")

        response = await self.exchange.withdraw(
            coin,
            float(amount),
            address,
            None,
            {"network": network}
        )
        await self.logger_msg(
            msg=f"response: {json.dumps(response, default=str)}",
            type_msg="debug", method_name="withdraw"
        )

        withdrawal_id = (response or {}).get("id")
        if not withdrawal_id:
            raise ExchangeWithdrawalFailed(f"No withdrawal id in response: {json.dumps(response, default=str)}")

        return str(withdrawal_id)
