from .logging_config import AsyncLogger, set_debug_logging
