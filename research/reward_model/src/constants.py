# Fixed point scale factors
DECIMAL_FRACTIONAL = 1_000_000_000_000_000_000  # 1e18, 18 decimal places
DECIMAL_PLACES = 18

# Integer widths
U128_MAX = 2**128 - 1  # storage width for amounts and index atomics
U256_MAX = 2**256 - 1  # intermediate width for ratio arithmetic

# Denoms
DEFAULT_REWARD_DENOM = "uusd"
DEFAULT_TAX_EXEMPT_DENOMS = ("uluna",)

# Tax defaults (host ledger)
DEFAULT_TAX_RATE = "0.001"  # 0.1%
DEFAULT_TAX_CAP = 1_000_000  # 1 unit of a 6 decimal denom

# Storage keys
CONFIG_KEY = b"config"
STATE_KEY = b"state"

# Audit attribute action tags
ACTION_SWAP = "swap"
ACTION_UPDATE_GLOBAL_INDEX = "update_global_index"
ACTION_SEND_REWARD = "send_reward"
