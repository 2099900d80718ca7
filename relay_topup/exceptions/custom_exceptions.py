from enum import Enum
from typing import ClassVar


class ErrorKind(str, Enum):
    TERMINAL = "terminal"
    FATAL = "fatal"
    TRANSIENT = "transient"


class ConfigurationError(Exception):
    """
    Base class for configuration errors.

    Used for handling errors related to application settings.
    """


class WalletError(Exception):
    """
    Base class for wallet-related errors.

    Used as a parent class for all wallet-related exceptions.
    """


class TopupError(Exception):
    """
    Base class for errors raised while topping up a single wallet.

    Every subclass carries an ``ErrorKind`` so callers can decide how to
    report the failure without inspecting the message.
    """
    kind: ClassVar[ErrorKind] = ErrorKind.FATAL


class DeadlineExceeded(TopupError):
    """Balance did not change before the waiting deadline."""
    kind = ErrorKind.TERMINAL


class FeeTooHigh(TopupError):
    """Relayer fee quoted by the aggregator exceeds the configured limit."""
    kind = ErrorKind.TERMINAL


class UnsupportedChain(TopupError):
    """Chain cannot be used for a CEX withdrawal or a bridge."""
    kind = ErrorKind.TERMINAL


class NetworkMismatch(TopupError):
    """Signer is connected to a different network than expected."""


class UnexpectedTarget(TopupError):
    """Bridge transaction is addressed to an unknown contract."""


class ExchangeWithdrawalFailed(TopupError):
    """Exchange did not return a withdrawal id."""


class TransactionReverted(TopupError):
    """Transaction was mined with a failed status."""


class BridgeUnavailable(TopupError):
    """Bridge aggregator did not answer after all retry attempts."""
    kind = ErrorKind.TRANSIENT


class NotificationFailed(TopupError):
    """Notification could not be delivered to a recipient."""
    kind = ErrorKind.TRANSIENT


class InvalidStateTransition(TopupError):
    """Pipeline was asked to move to a state it cannot reach."""
