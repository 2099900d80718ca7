from decimal import Decimal
from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class ChainAccessor(Protocol):
    async def get_balance(self, address: str) -> int: ...

    async def get_network_id(self) -> int: ...

    async def gas_price_gwei(self) -> float: ...

    async def send_transaction(self, payload: dict[str, Any]) -> str: ...

    async def close(self) -> None: ...


@runtime_checkable
class ExchangeAccessor(Protocol):
    async def get_withdraw_fee(self, coin: str, network: str) -> float: ...

    async def withdraw(self, address: str, coin: str, network: str, amount: Decimal) -> str: ...

    async def close(self) -> None: ...


@runtime_checkable
class NotificationSender(Protocol):
    async def send_message(self, recipient: str, text: str) -> None: ...

    async def notify_all(self, text: str) -> None: ...
