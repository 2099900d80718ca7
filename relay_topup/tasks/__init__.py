from .balance_poller import BalanceChangePoller
from .bridge import RelayBridge
from .gas_gate import GasPriceGate, GasRatchetState
from .topup import TopupDependencies, TopupModule, failure_message, success_message
