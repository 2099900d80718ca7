from .load_config import load_config
from .logger_trx import show_trx_log
from .queue_storage import QueueStorage
from .randomizer import (
    rand_decimal_with_dec,
    rand_float,
    rand_int,
    random_choice,
    round_to_appropriate_decimal_place,
    shuffle_list,
)
from .retry import RetryPolicy
from .utils import AccountProgress, get_address, random_sleep
