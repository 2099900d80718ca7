from relay_topup.utils import load_config

config = load_config()
