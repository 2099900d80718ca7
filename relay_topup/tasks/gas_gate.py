import asyncio
import random
import time
from dataclasses import dataclass
from typing import Awaitable, Callable

from configs import GAS_SLEEP_RANGE
from relay_topup.logger import AsyncLogger
from relay_topup.models.config_model import GasSettings
from relay_topup.models.protocols import ChainAccessor


@dataclass(slots=True)
class GasRatchetState:
    ceiling_gwei: float
    next_increase_at: float

    def ratchet(self, now: float, settings: GasSettings) -> bool:
        """Raise the ceiling by one step when its time has come; never above ``max_gwei``."""
        if now < self.next_increase_at or settings.step == 0 or self.ceiling_gwei >= settings.max_gwei:
            return False

        self.ceiling_gwei = min(self.ceiling_gwei + settings.step, settings.max_gwei)
        self.next_increase_at = now + settings.delay_minutes * 60
        return True


class GasPriceGate(AsyncLogger):
    """
    Blocks until the reference chain gas price fits under a rising ceiling.

    There is no deadline: a price that stays above ``max_gwei`` keeps the
    gate closed.
    """

    def __init__(
        self,
        source: ChainAccessor,
        settings: GasSettings,
        sleep_range: tuple[float, float] = GAS_SLEEP_RANGE,
        sleep_func: Callable[[float], Awaitable[None]] = asyncio.sleep,
        clock: Callable[[], float] = time.monotonic
    ) -> None:
        super().__init__()
        self.source = source
        self.settings = settings
        self.sleep_range = sleep_range
        self._sleep = sleep_func
        self._clock = clock

    async def wait(self, account_name: str | None = None) -> GasRatchetState:
        state = GasRatchetState(
            ceiling_gwei=self.settings.start_gwei,
            next_increase_at=self._clock() + self.settings.delay_minutes * 60
        )

        await self.logger_msg(msg="Waiting for gas...", account_name=account_name)
        while True:
            previous = state.ceiling_gwei
            if state.ratchet(self._clock(), self.settings):
                await self.logger_msg(
                    msg=f"Increasing max gas {previous} -> {state.ceiling_gwei} GWEI",
                    account_name=account_name
                )

            gas_price = await self.source.gas_price_gwei()

            if gas_price <= state.ceiling_gwei:
                await self.logger_msg(
                    msg=f"current gas is {gas_price:.1f}, my current max is {state.ceiling_gwei}",
                    type_msg="debug", account_name=account_name
                )
                await self.logger_msg(msg="gas ok, proceeding", account_name=account_name)
                return state

            await self.logger_msg(
                msg=f"current gas is {gas_price:.1f}, my current max is {state.ceiling_gwei}, waiting...",
                type_msg="debug", account_name=account_name
            )
            await self._sleep(random.uniform(*self.sleep_range))
