import tempfile
import unittest
from unittest.mock import AsyncMock

from module_processor import ModuleProcessor
from relay_topup.models import CHAINS, QueueState
from relay_topup.tasks import BalanceChangePoller, GasPriceGate, TopupDependencies
from relay_topup.utils import QueueStorage, get_address

from fakes import KEYS, FakeChain, FakeClock, FakeExchange, FakeNotifier, FakeRelayClient, make_config

LINES = tuple(f"w{index}|{key}" for index, key in enumerate(KEYS, start=1))


class Interrupted(BaseException):
    pass


class SnapshotStorage(QueueStorage):
    def __init__(self, data_dir: str) -> None:
        super().__init__(data_dir)
        self.snapshots: list[QueueState] = []

    async def save(self, state: QueueState) -> None:
        self.snapshots.append(state)
        await super().save(state)


class ModuleProcessorTests(unittest.IsolatedAsyncioTestCase):
    async def asyncSetUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.storage = SnapshotStorage(self._tmp.name)
        self.clock = FakeClock()
        self.exchange = FakeExchange(failing_addresses={get_address(KEYS[1])})
        self.notifier = FakeNotifier()
        self.sleep = AsyncMock()

        config = make_config()
        self.deps = TopupDependencies(
            config=config,
            exchange=self.exchange,
            notifier=self.notifier,
            gas_gate=GasPriceGate(
                FakeChain(gas_prices=[1.0]), config.gas, sleep_func=self.clock.sleep, clock=self.clock
            ),
            chain_factory=lambda keypair, chain, proxy: FakeChain(
                balances=[0, 10 ** 16], network_id=CHAINS[chain].id
            ),
            relay_client_factory=lambda proxy: FakeRelayClient(),
            poller=BalanceChangePoller(poll_interval=5, sleep_func=self.clock.sleep, clock=self.clock),
            sleep_func=self.sleep,
        )
        self.processor = ModuleProcessor(self.deps, self.storage)

    async def asyncTearDown(self) -> None:
        self._tmp.cleanup()

    async def test_batch_isolates_failed_wallet(self) -> None:
        state = await self.processor.run_batch(QueueState.from_lines(list(LINES)))

        self.assertEqual(state.succeeded, (LINES[0], LINES[2]))
        self.assertEqual(state.failed, (LINES[1],))
        self.assertEqual(state.remaining, ())

        successes = [message for message in self.notifier.messages if message.startswith("✅")]
        failures = [message for message in self.notifier.messages if message.startswith("⛔️")]
        self.assertEqual(len(successes), 2)
        self.assertEqual(len(failures), 1)
        self.assertIn("#w2", failures[0])
        self.assertIn("withdrawal rejected", failures[0])

        self.assertEqual(self.processor.progress.processed, 3)
        self.assertEqual(self.processor.progress.success, 2)

    async def test_queue_is_persisted_after_every_wallet(self) -> None:
        await self.processor.run_batch(QueueState.from_lines(list(LINES)))

        self.assertEqual([len(snapshot.remaining) for snapshot in self.storage.snapshots], [2, 1, 0])
        for snapshot in self.storage.snapshots:
            self.assertEqual(
                sorted(snapshot.remaining + snapshot.succeeded + snapshot.failed), sorted(LINES)
            )
        self.assertEqual(await self.storage.load(), self.storage.snapshots[-1])

    async def test_no_sleep_after_last_wallet(self) -> None:
        await self.processor.run_batch(QueueState.from_lines(list(LINES)))

        between_wallets = [call for call in self.sleep.await_args_list if call.args[0] is None]
        self.assertEqual(len(between_wallets), 2)

    async def test_malformed_line_is_recorded_as_failed(self) -> None:
        state = await self.processor.run_batch(QueueState.from_lines(["broken-line"]))

        self.assertEqual(state.failed, ("broken-line",))
        self.assertEqual(len(self.notifier.messages), 1)
        self.assertIn("#broken-line", self.notifier.messages[0])

    async def test_interrupted_wallet_leaves_remaining(self) -> None:
        self.exchange.failing_addresses = {get_address(KEYS[0])}
        self.exchange.error = Interrupted()

        with self.assertRaises(Interrupted):
            await self.processor.run_batch(QueueState.from_lines(list(LINES)))

        self.assertEqual(self.storage.snapshots[-1].failed, (LINES[0],))
        self.assertEqual(self.storage.snapshots[-1].remaining, LINES[1:])

    async def test_empty_queue_is_a_no_op(self) -> None:
        state = await self.processor.run_batch(QueueState())

        self.assertEqual(state, QueueState())
        self.assertEqual(self.storage.snapshots, [])

    async def test_loads_queue_from_storage_when_not_given(self) -> None:
        await QueueStorage(self._tmp.name).save(QueueState.from_lines([LINES[0]], succeeded=["old|k0"]))

        state = await self.processor.run_batch()

        self.assertEqual(state.succeeded, ("old|k0", LINES[0]))
        self.assertEqual(state.remaining, ())


if __name__ == "__main__":
    unittest.main()
