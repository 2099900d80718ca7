from contextlib import AsyncExitStack
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Awaitable, Callable

from better_proxy import Proxy

from configs import DEST_CHAIN
from relay_topup.api.relay_client import RelayClient
from relay_topup.logger import AsyncLogger
from relay_topup.models.chains import CHAINS
from relay_topup.models.config_model import Config
from relay_topup.models.pipeline import FundingJob, PipelineState, WalletRecord
from relay_topup.models.protocols import ChainAccessor, ExchangeAccessor, NotificationSender
from relay_topup.tasks.balance_poller import BalanceChangePoller
from relay_topup.tasks.bridge import RelayBridge
from relay_topup.tasks.gas_gate import GasPriceGate
from relay_topup.utils import (
    get_address,
    rand_decimal_with_dec,
    rand_float,
    random_choice,
    random_sleep,
    round_to_appropriate_decimal_place,
    show_trx_log,
)


ChainFactory = Callable[[str, str, Proxy | None], ChainAccessor]
RelayClientFactory = Callable[[Proxy | None], RelayClient]
SleepFunc = Callable[[str | None, int, int], Awaitable[None]]


def success_message(name: str, amount: Decimal) -> str:
    return f"✅ Wallet: #{name}\n\n#Successfully topped up {amount} ETH"


def failure_message(name: str, reason: str) -> str:
    return f"⛔️ Wallet: #{name}\n\n#Failed to topup, reason: {reason}"


@dataclass
class TopupDependencies:
    config: Config
    exchange: ExchangeAccessor
    notifier: NotificationSender
    gas_gate: GasPriceGate
    chain_factory: ChainFactory
    relay_client_factory: RelayClientFactory
    poller: BalanceChangePoller = field(default_factory=BalanceChangePoller)
    sleep_func: SleepFunc = random_sleep


class TopupModule(AsyncLogger):
    """
    Drives one wallet from CEX withdrawal to a mainnet balance.

    The job walks through ``PipelineState`` in order; any exception marks it
    failed and propagates to the caller, which owns failure reporting.
    """

    def __init__(self, record: WalletRecord, deps: TopupDependencies) -> None:
        super().__init__()
        self.record = record
        self.deps = deps
        self.config = deps.config
        self.job: FundingJob | None = None

    async def _log(self, msg: str, type_msg: str = "info") -> None:
        await self.logger_msg(
            msg=msg, type_msg=type_msg, account_name=self.record.name,
            address=self.job.address if self.job else None
        )

    def plan(self) -> FundingJob:
        amounts = self.config.topup_amount
        share = self.config.bridge_share

        topup_amount = rand_decimal_with_dec(
            amounts.min, amounts.max, amounts.min_decimals, amounts.max_decimals
        )
        bridge_amount = round_to_appropriate_decimal_place(
            topup_amount * Decimal(str(rand_float(share.min, share.max))),
            share.min_decimals,
            share.max_decimals
        )

        return FundingJob(
            record=self.record,
            address=get_address(self.record.private_key),
            origin_chain=random_choice(self.config.topup_chains),
            destination_chain=DEST_CHAIN,
            topup_amount=topup_amount,
            bridge_amount=bridge_amount,
        )

    async def run(self) -> FundingJob:
        self.job = self.plan()
        job = self.job

        async with AsyncExitStack() as stack:
            try:
                out_chain = self.deps.chain_factory(self.record.private_key, job.origin_chain, self.record.proxy)
                stack.push_async_callback(out_chain.close)
                in_chain = self.deps.chain_factory(self.record.private_key, job.destination_chain, self.record.proxy)
                stack.push_async_callback(in_chain.close)

                await self._execute(job, out_chain, in_chain)
            except BaseException:
                job.fail()
                raise

        return job

    async def _execute(self, job: FundingJob, out_chain: ChainAccessor, in_chain: ChainAccessor) -> None:
        deadline = self.config.balance_deadline_sec

        if self.config.wait_for_gas_for_cex_topup:
            await self.deps.gas_gate.wait(account_name=self.record.name)

        job.advance(PipelineState.WITHDRAWING)
        balance_before_topup = await out_chain.get_balance(job.address)
        await self._log(f"balance before cex topup: {balance_before_topup} WEI", "debug")

        await self._log(
            f"topping up wallet, chain: {job.origin_chain}, amount: {job.topup_amount} ETH"
        )
        withdrawal_id = await self.deps.exchange.withdraw(
            job.address, "ETH", CHAINS[job.origin_chain].binance_network, job.topup_amount
        )
        await self._log(f"successfully withdrew ETH from CEX, wdid: {withdrawal_id}")

        job.advance(PipelineState.AWAITING_ORIGIN_DEPOSIT)
        await self.deps.poller.wait_for_change(
            out_chain, job.address, balance_before_topup, deadline, account_name=self.record.name
        )
        await self._log("wallet received ETH")

        job.advance(PipelineState.PRE_BRIDGE_DELAY)
        delay = self.config.delay_after_cex_withdraw
        await self.deps.sleep_func(job.address, delay.min, delay.max)

        job.advance(PipelineState.GAS_GATE)
        await self.deps.gas_gate.wait(account_name=self.record.name)

        job.advance(PipelineState.BRIDGING)
        balance_before_relay = await in_chain.get_balance(job.address)
        await self._log(f"balance before relay: {balance_before_relay} WEI", "debug")

        await self._log(f"relaying {job.bridge_amount} ETH to {job.destination_chain}")
        async with self.deps.relay_client_factory(self.record.proxy) as relay_client:
            bridge = RelayBridge(
                signer=out_chain,
                address=job.address,
                out_chain_name=job.origin_chain,
                in_chain_name=job.destination_chain,
                relay_client=relay_client,
                account_name=self.record.name
            )
            tx_hash = await bridge.perform_eth_relay(job.bridge_amount, self.config.max_relayer_fee_eth)

        await show_trx_log(
            job.address,
            f"Relay {job.bridge_amount} ETH {job.origin_chain} -> {job.destination_chain}",
            CHAINS[job.origin_chain].explorer, tx_hash,
            account_name=self.record.name
        )

        job.advance(PipelineState.AWAITING_DESTINATION_DEPOSIT)
        await self.deps.poller.wait_for_change(
            in_chain, job.address, balance_before_relay, deadline, account_name=self.record.name
        )
        await self._log(f"{job.destination_chain} topped up", "success")

        job.advance(PipelineState.NOTIFYING)
        await self.deps.notifier.notify_all(success_message(self.record.name, job.bridge_amount))

        job.advance(PipelineState.SUCCEEDED)
