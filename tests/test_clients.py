import unittest
from decimal import Decimal
from unittest.mock import AsyncMock, MagicMock

from relay_topup.api import BinanceClient, TelegramNotifier
from relay_topup.exceptions import ExchangeWithdrawalFailed, NotificationFailed, UnsupportedChain

ADDRESS = "0x19E7E376E7C213B7E7e7e46cc70A5dD086DAff2A"


def make_exchange(response: dict | None = None) -> MagicMock:
    exchange = MagicMock()
    exchange.fetch_deposit_withdraw_fees = AsyncMock(
        return_value={"ETH": {"networks": {"ARBITRUM": {"withdraw": {"fee": 0.0001}}}}}
    )
    exchange.withdraw = AsyncMock(return_value={"id": 4242} if response is None else response)
    exchange.close = AsyncMock()
    return exchange


class BinanceClientTests(unittest.IsolatedAsyncioTestCase):
    async def test_withdraw_sends_network_and_returns_id(self) -> None:
        exchange = make_exchange()
        client = BinanceClient("key", "secret", exchange=exchange)

        withdrawal_id = await client.withdraw(ADDRESS, "ETH", "ARBITRUM", Decimal("0.0081"))

        self.assertEqual(withdrawal_id, "4242")
        exchange.withdraw.assert_awaited_once_with("ETH", 0.0081, ADDRESS, None, {"network": "ARBITRUM"})

    async def test_withdraw_fee_lookup(self) -> None:
        client = BinanceClient("key", "secret", exchange=make_exchange())

        self.assertEqual(await client.get_withdraw_fee("ETH", "ARBITRUM"), 0.0001)

    async def test_linea_is_rejected_before_exchange_calls(self) -> None:
        exchange = make_exchange()
        client = BinanceClient("key", "secret", exchange=exchange)

        with self.assertRaises(UnsupportedChain):
            await client.withdraw(ADDRESS, "ETH", "LINEA", Decimal("0.0081"))
        exchange.fetch_deposit_withdraw_fees.assert_not_awaited()
        exchange.withdraw.assert_not_awaited()

    async def test_missing_id_is_a_failed_withdrawal(self) -> None:
        client = BinanceClient("key", "secret", exchange=make_exchange(response={"info": {}}))

        with self.assertRaises(ExchangeWithdrawalFailed):
            await client.withdraw(ADDRESS, "ETH", "ARBITRUM", Decimal("0.0081"))

    async def test_context_manager_closes_exchange(self) -> None:
        exchange = make_exchange()
        async with BinanceClient("key", "secret", exchange=exchange):
            pass
        exchange.close.assert_awaited_once()


class TelegramNotifierTests(unittest.IsolatedAsyncioTestCase):
    def make_bot(self) -> MagicMock:
        bot = MagicMock()
        bot.send_message = AsyncMock()
        bot.close_session = AsyncMock()
        return bot

    async def test_thread_id_is_split_from_chat(self) -> None:
        bot = self.make_bot()
        notifier = TelegramNotifier("token", [], bot=bot, pause=0)

        await notifier.send_message("-100200/7", "hello")

        args, kwargs = bot.send_message.call_args
        self.assertEqual(args, ("-100200", "hello"))
        self.assertEqual(kwargs["message_thread_id"], 7)
        self.assertEqual(kwargs["parse_mode"], "HTML")

    async def test_plain_chat_has_no_thread(self) -> None:
        bot = self.make_bot()
        notifier = TelegramNotifier("token", [], bot=bot, pause=0)

        await notifier.send_message("1001", "hello")

        self.assertIsNone(bot.send_message.call_args.kwargs["message_thread_id"])

    async def test_send_failure_is_wrapped(self) -> None:
        bot = self.make_bot()
        bot.send_message.side_effect = RuntimeError("chat not found")
        notifier = TelegramNotifier("token", [], bot=bot, pause=0)

        with self.assertRaises(NotificationFailed):
            await notifier.send_message("1001", "hello")

    async def test_missing_token_cannot_send(self) -> None:
        notifier = TelegramNotifier("", ["1001"], pause=0)

        with self.assertRaises(NotificationFailed):
            await notifier.send_message("1001", "hello")

    async def test_notify_all_keeps_going_after_a_failed_chat(self) -> None:
        bot = self.make_bot()
        bot.send_message.side_effect = [RuntimeError("blocked"), None, None]
        notifier = TelegramNotifier("token", ["1", "2", "3"], bot=bot, pause=0)

        await notifier.notify_all("hello")

        self.assertEqual([call.args[0] for call in bot.send_message.call_args_list], ["1", "2", "3"])

    async def test_close_releases_bot_session(self) -> None:
        bot = self.make_bot()
        async with TelegramNotifier("token", ["1"], bot=bot, pause=0):
            pass
        bot.close_session.assert_awaited_once()


if __name__ == "__main__":
    unittest.main()
