import random
from dataclasses import dataclass

from configs import MAX_RETRY_ATTEMPTS, RETRY_SLEEP_RANGE


@dataclass(frozen=True, slots=True)
class RetryPolicy:
    max_attempts: int = MAX_RETRY_ATTEMPTS
    backoff_range: tuple[float, float] = RETRY_SLEEP_RANGE

    def __post_init__(self) -> None:
        if self.max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        if self.backoff_range[0] > self.backoff_range[1]:
            raise ValueError("backoff_range min must not exceed max")

    def attempts(self) -> range:
        return range(1, self.max_attempts + 1)

    def backoff(self) -> float:
        return random.uniform(*self.backoff_range)
