"""In-memory stand-ins for the chain, exchange, relay and notification collaborators."""

from decimal import Decimal
from typing import Any

from configs import RELAY_ADDRESS
from relay_topup.models import BridgeQuote, Config


KEYS = ("0x" + "11" * 32, "0x" + "22" * 32, "0x" + "33" * 32)


def make_config(**overrides: Any) -> Config:
    params: dict[str, Any] = {
        "tg_chat_ids": ["1001"],
        "topup_amount": {"min": 0.005, "max": 0.01, "min_decimals": 4, "max_decimals": 7},
        "bridge_share": {"min": 0.90, "max": 0.93, "min_decimals": 2, "max_decimals": 5},
        "topup_chains": ["arbitrum"],
        "gas": {"start_gwei": 5, "step": 1, "delay_minutes": 2, "max_gwei": 10},
        "delay_after_cex_withdraw": {"min": 60, "max": 300},
        "delay_between_accounts": {"min": 60, "max": 300},
        "shuffle_wallets": False,
        "max_relayer_fee_eth": 0.0003,
        "balance_deadline_sec": 600,
    }
    params.update(overrides)
    return Config.model_validate(params)


def make_quote(to: str = RELAY_ADDRESS, relayer_fee_wei: int = 10 ** 13) -> BridgeQuote:
    return BridgeQuote(
        transaction_payload={"to": to, "value": "8000000000000000", "data": "0x", "chainId": 42161},
        relayer_fee_wei=relayer_fee_wei,
        status_check_endpoint="/intents/status?requestId=0x01",
    )


def relay_response(to: str = RELAY_ADDRESS, relayer_fee_wei: int = 10 ** 13) -> dict:
    return {
        "steps": [{
            "items": [{
                "data": {"to": to, "value": "8000000000000000", "data": "0x", "chainId": 42161},
                "check": {"endpoint": "/intents/status?requestId=0x01"},
            }]
        }],
        "fees": {"relayer": str(relayer_fee_wei)},
    }


class FakeClock:
    def __init__(self) -> None:
        self.now = 0.0
        self.sleeps: list[float] = []

    def __call__(self) -> float:
        return self.now

    async def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.now += seconds


class FakeChain:
    """Returns ``balances`` one by one and then keeps repeating the last value."""

    def __init__(
        self,
        balances: list[int] | None = None,
        network_id: int = 42161,
        gas_prices: list[float] | None = None,
        tx_hash: str = "0xfeed"
    ) -> None:
        self.balances = list(balances or [0])
        self.network_id = network_id
        self.gas_prices = list(gas_prices or [1.0])
        self.tx_hash = tx_hash
        self.balance_calls = 0
        self.network_calls = 0
        self.gas_calls = 0
        self.sent: list[dict] = []
        self.closed = False

    async def get_balance(self, address: str) -> int:
        self.balance_calls += 1
        if len(self.balances) > 1:
            return self.balances.pop(0)
        return self.balances[0]

    async def get_network_id(self) -> int:
        self.network_calls += 1
        return self.network_id

    async def gas_price_gwei(self) -> float:
        self.gas_calls += 1
        if len(self.gas_prices) > 1:
            return self.gas_prices.pop(0)
        return self.gas_prices[0]

    async def send_transaction(self, payload: dict) -> str:
        self.sent.append(payload)
        return self.tx_hash

    async def close(self) -> None:
        self.closed = True


class FakeExchange:
    def __init__(self, failing_addresses: set[str] | None = None, error: Exception | None = None) -> None:
        self.failing_addresses = failing_addresses or set()
        self.error = error or RuntimeError("withdrawal rejected")
        self.withdrawals: list[tuple[str, str, str, Decimal]] = []

    async def get_withdraw_fee(self, coin: str, network: str) -> float:
        return 0.0001

    async def withdraw(self, address: str, coin: str, network: str, amount: Decimal) -> str:
        if address in self.failing_addresses:
            raise self.error
        self.withdrawals.append((address, coin, network, amount))
        return f"wd-{len(self.withdrawals)}"

    async def close(self) -> None:
        pass


class FakeNotifier:
    def __init__(self) -> None:
        self.messages: list[str] = []

    async def send_message(self, recipient: str, text: str) -> None:
        self.messages.append(text)

    async def notify_all(self, text: str) -> None:
        self.messages.append(text)


class FakeRelayClient:
    def __init__(self, quote: BridgeQuote | None = None, error: Exception | None = None) -> None:
        self.quote = quote or make_quote()
        self.error = error
        self.calls: list[dict] = []

    async def __aenter__(self) -> "FakeRelayClient":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        pass

    async def get_tx_details(self, **kwargs: Any) -> BridgeQuote:
        self.calls.append(kwargs)
        if self.error is not None:
            raise self.error
        return self.quote
