# ---------------------------------- Extra ----------------------------------
SHUFFLE_WALLETS = True  # True/False Shuffle wallets before use (default for settings.yaml)

# --------------------------------- General ---------------------------------
MAX_RETRY_ATTEMPTS = 5  # Number of attempts for Relay API requests
RETRY_SLEEP_RANGE = (1, 5)  # (min, max) in seconds between Relay API attempts
REQUEST_TIMEOUT = 5  # seconds per Relay API request
NOTIFY_SLEEP = 1  # seconds between Telegram recipients

# --------------------------------- Waiting ---------------------------------
BALANCE_POLL_INTERVAL = 5  # seconds between balance checks
GAS_SLEEP_RANGE = (30, 60)  # (min, max) in seconds between gas checks

# --------------------------------- Bridge ---------------------------------
DEST_CHAIN = 'ethereum'
RELAY_API_URL = 'https://api.relay.link'
RELAY_ADDRESS = '0xf70da97812cb96acdf810712aa562db8dfa3dbef'
