from .base_client import APIResponse, BaseAPIClient
from .binance_client import BinanceClient
from .relay_client import RelayClient
from .telegram_client import TelegramNotifier
