import asyncio
from typing import Self

from telebot.async_telebot import AsyncTeleBot

from configs import NOTIFY_SLEEP
from relay_topup.exceptions.custom_exceptions import NotificationFailed
from relay_topup.logger import AsyncLogger


class TelegramNotifier(AsyncLogger):
    """
    Sends plain notifications to every configured chat.

    A chat entry is either ``chat_id`` or ``chat_id/thread_id`` for forum
    topics. Delivery problems never propagate out of ``notify_all``.
    """

    def __init__(
        self,
        bot_token: str,
        chat_ids: list[str],
        bot: AsyncTeleBot | None = None,
        pause: float = NOTIFY_SLEEP
    ) -> None:
        super().__init__()
        self.chat_ids = chat_ids
        self.bot = bot or (AsyncTeleBot(bot_token) if bot_token else None)
        self.pause = pause

    async def __aenter__(self) -> Self:
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()

    async def close(self) -> None:
        if self.bot is not None:
            await self.bot.close_session()

    async def send_message(self, recipient: str, text: str) -> None:
        if self.bot is None:
            raise NotificationFailed("Telegram bot token is not configured")

        chat_id, _, thread_id = recipient.partition("/")
        try:
            await self.bot.send_message(
                chat_id,
                text,
                parse_mode="HTML",
                message_thread_id=int(thread_id) if thread_id else None,
                disable_notification=False,
                disable_web_page_preview=True
            )
        except Exception as error:
            raise NotificationFailed(
                f"Failed to send notification to chat {recipient}, reason: {error}"
            ) from error

    async def notify_all(self, text: str) -> None:
        for chat in self.chat_ids:
            try:
                await self.send_message(chat, text)
            except NotificationFailed as error:
                await self.logger_msg(msg=str(error), type_msg="warning", method_name="notify_all")

            await asyncio.sleep(self.pause)
