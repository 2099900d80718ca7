from .chains import CHAINS, ChainConfig
from .config_model import AmountRange, Config, DelayRange, GasSettings, ShareRange
from .pipeline import BridgeQuote, FundingJob, PipelineState, WalletRecord
from .protocols import ChainAccessor, ExchangeAccessor, NotificationSender
from .queue_model import QueueState
