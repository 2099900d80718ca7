import asyncio
import time
from typing import Awaitable, Callable

from configs import BALANCE_POLL_INTERVAL
from relay_topup.exceptions.custom_exceptions import DeadlineExceeded
from relay_topup.logger import AsyncLogger
from relay_topup.models.protocols import ChainAccessor


class BalanceChangePoller(AsyncLogger):
    """
    Waits until an address balance differs from a captured baseline.

    Any change counts, a decrease included, so an unrelated outgoing
    transfer during the wait is taken for the awaited deposit.
    """

    def __init__(
        self,
        poll_interval: float = BALANCE_POLL_INTERVAL,
        sleep_func: Callable[[float], Awaitable[None]] = asyncio.sleep,
        clock: Callable[[], float] = time.monotonic
    ) -> None:
        super().__init__()
        self.poll_interval = poll_interval
        self._sleep = sleep_func
        self._clock = clock

    async def wait_for_change(
        self,
        chain: ChainAccessor,
        address: str,
        initial_balance: int,
        deadline_sec: float,
        account_name: str | None = None
    ) -> int:
        await self.logger_msg(
            msg="Waiting for balance change...", type_msg="debug",
            account_name=account_name, address=address
        )
        start = self._clock()

        while True:
            if self._clock() - start > deadline_sec:
                raise DeadlineExceeded(
                    f"Deadline for balance change wait ({deadline_sec} sec) was reached"
                )

            new_balance = await chain.get_balance(address)
            if new_balance != initial_balance:
                await self.logger_msg(
                    msg=f"{initial_balance} WEI -> {new_balance} WEI", type_msg="debug",
                    account_name=account_name, address=address
                )
                return new_balance

            await self._sleep(self.poll_interval)
