import asyncio

from configs import DEST_CHAIN
from relay_topup.api import BinanceClient, RelayClient, TelegramNotifier
from relay_topup.console import Console
from relay_topup.exceptions.custom_exceptions import ErrorKind
from relay_topup.logger import AsyncLogger, set_debug_logging
from relay_topup.models import QueueState, WalletRecord
from relay_topup.tasks import GasPriceGate, TopupDependencies, TopupModule, failure_message
from relay_topup.utils import AccountProgress, QueueStorage, shuffle_list
from relay_topup.wallet import ChainClient, Wallet


logger = AsyncLogger()


def _wallet_name(line: str) -> str:
    return line.split("|", 1)[0].strip() or "Unknown"


class ModuleProcessor:
    def __init__(self, deps: TopupDependencies, storage: QueueStorage) -> None:
        self.deps = deps
        self.config = deps.config
        self.storage = storage
        self.progress = AccountProgress()
        self.state = QueueState()

    async def process_account(self, line: str) -> bool:
        name = _wallet_name(line)

        try:
            record = WalletRecord.from_line(line)
            await TopupModule(record, self.deps).run()
            return True

        except Exception as e:
            reason = str(e) or type(e).__name__
            kind = getattr(e, "kind", ErrorKind.FATAL)
            await logger.logger_msg(
                f"failed to topup {DEST_CHAIN}, reason: {reason}",
                type_msg="warning" if kind is ErrorKind.TERMINAL else "error",
                account_name=name,
                method_name="process_account"
            )

            await self.deps.notifier.notify_all(failure_message(name, reason))
            return False

    async def _update_statistics(self, success: bool) -> None:
        if success:
            self.progress.success += 1

        self.progress.increment()

        log_message = (
            f"📊 Statistics: {self.progress.processed}/{self.progress.total} accounts processed | "
            f"✅ Success: {self.progress.success} ({self.progress.success_rate}%)"
        )
        await logger.logger_msg(log_message, type_msg="info")

    async def _log_final_stats(self) -> None:
        total = self.progress.total
        success_percent = round(self.progress.success / total * 100, 2) if total > 0 else 0
        error_count = total - self.progress.success
        error_percent = round(100 - success_percent, 2) if total > 0 else 0

        await logger.logger_msg(f"🏁 FINAL STATISTICS 🏁", type_msg="info")
        await logger.logger_msg(f"━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━", type_msg="info")
        await logger.logger_msg(f"✅ Success: {self.progress.success}/{total} ({success_percent}%)", type_msg="info")
        await logger.logger_msg(f"❌ Errors: {error_count}/{total} ({error_percent}%)", type_msg="info")
        await logger.logger_msg(f"⏱️ Total processed: {self.progress.processed}", type_msg="info")
        await logger.logger_msg(f"━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━", type_msg="info")

    async def run_batch(self, state: QueueState | None = None) -> QueueState:
        self.state = state if state is not None else await self.storage.load()
        wallets = list(self.state.remaining)

        if not wallets:
            await logger.logger_msg(
                "No wallets left to process", type_msg="warning", method_name="run_batch"
            )
            return self.state

        if self.config.shuffle_wallets:
            wallets = shuffle_list(wallets)

        self.progress.reset(len(wallets))
        delay = self.config.delay_between_accounts

        for index, line in enumerate(wallets, start=1):
            success = False
            try:
                success = await self.process_account(line)
            finally:
                # the wallet leaves `remaining` even when the run is interrupted
                self.state = self.state.record(line, success)
                await self.storage.save(self.state)
                await self._update_statistics(success)

            if index < len(wallets):
                await self.deps.sleep_func(None, delay.min, delay.max)

        await self._log_final_stats()
        return self.state


async def main_loop() -> None:
    from bot_loader import config

    set_debug_logging(config.show_debug_log)
    await logger.logger_msg("✅ The program has been started", type_msg="info")

    storage = QueueStorage()
    state = await storage.load()
    Console().build(config, len(state.remaining))

    async with (
        BinanceClient(config.binance_api_key, config.binance_api_secret) as exchange,
        TelegramNotifier(config.tg_token, config.tg_chat_ids) as notifier,
        ChainClient(config.rpc_for(DEST_CHAIN)) as gas_source,
    ):
        deps = TopupDependencies(
            config=config,
            exchange=exchange,
            notifier=notifier,
            gas_gate=GasPriceGate(gas_source, config.gas),
            chain_factory=lambda keypair, chain, proxy: Wallet(keypair, config.rpc_for(chain), proxy),
            relay_client_factory=lambda proxy: RelayClient(proxy=proxy),
        )

        processor = ModuleProcessor(deps, storage)
        try:
            await processor.run_batch(state)
        except asyncio.CancelledError:
            await logger.logger_msg(
                "🚨 Manual interruption!", type_msg="warning", method_name="main_loop"
            )
            raise

    await logger.logger_msg(
        "👋 Goodbye! The terminal is ready for commands.",
        type_msg="info"
    )
