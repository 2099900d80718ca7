import asyncio
from dataclasses import dataclass

from eth_account import Account

from relay_topup.logger import AsyncLogger
from relay_topup.utils.randomizer import rand_int


async def random_sleep(
    address: str | None = None,
    min_sec: int = 30,
    max_sec: int = 60
) -> None:
    logger = AsyncLogger()
    delay = rand_int(min_sec, max_sec)

    minutes, seconds = divmod(delay, 60)
    template = (
        f"Sleep "
        f"{int(minutes)} minutes {seconds} seconds" if minutes > 0 else
        f"Sleep {seconds} seconds"
    )
    await logger.logger_msg(template, type_msg="info", address=address)

    try:
        await asyncio.sleep(delay)
    except asyncio.CancelledError:
        await logger.logger_msg(
            f"Sleep interrupted", type_msg="warning", address=address
        )
        raise


@dataclass
class AccountProgress:
    total: int = 0
    processed: int = 0
    success: int = 0

    def increment(self) -> None:
        self.processed += 1

    def reset(self, total: int = 0) -> None:
        self.total = total
        self.processed = 0
        self.success = 0

    @property
    def success_rate(self) -> float:
        return round(self.success / self.processed * 100, 2) if self.processed else 0


Account.enable_unaudited_hdwallet_features()


def get_address(keypair: str) -> str:
    normalized = ' '.join(word for word in keypair.split() if word)

    if len(normalized.split()) in (12, 24):
        return Account.from_mnemonic(normalized).address
    if not keypair.startswith('0x'):
        keypair = '0x' + keypair
    return Account.from_key(keypair).address
