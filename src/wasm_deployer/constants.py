"""Configuration constants for wasm-deployer library."""

# Fee denomination used when the caller sets none
DEFAULT_FEE_DENOM = "uluna"

# Label given to contract instances when the caller sets none
DEFAULT_INSTANCE_LABEL = "Instantiate"

# Ordered (event type, attribute key) lookups, first match wins.
# Event names drifted between ledger versions, so the older name is a fallback.
STORE_CODE_LOOKUPS = [
    ("store_code", "code_id"),
]
INSTANTIATE_LOOKUPS = [
    ("instantiate_contract", "_contract_address"),
    ("instantiate", "_contract_address"),
]

# Block inclusion polling, roughly one block time per attempt
DEFAULT_POLL_INTERVAL = 1.0
DEFAULT_POLL_ATTEMPTS = 50

# LCD request timeout in seconds
DEFAULT_REQUEST_TIMEOUT = 30

# Environment variables
LCD_URL_ENV = "WASM_DEPLOYER_LCD_URL"
CONFIG_PATH_ENV = "WASM_DEPLOYER_CONFIG"

# Default optimizer images keyed by host architecture
OPTIMIZER_IMAGES = {
    "x86_64": "cosmwasm/rust-optimizer:0.12.5",
    "arm64": "cosmwasm/rust-optimizer-arm64:0.12.5",
}

# Placeholders allowed in a custom optimize command from Cargo.toml
OPTIMIZE_PLACEHOLDERS = ("contract", "workspace")
