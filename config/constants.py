"""System constants and default values."""

# Supabase objects
TRADES_TABLE = "trades"
BALANCE_RPC = "update_account_balance"
BALANCE_RPC_ACCOUNT_PARAM = "p_account_id"
BALANCE_RPC_AMOUNT_PARAM = "p_amount"
DEFAULT_IMAGE_BUCKET = "trade-images"

# Repository configuration
DEFAULT_REPOSITORY_TYPE = "supabase"

# Display configuration
DEFAULT_CURRENCY = "USD"
CHART_HEIGHT = 400
CHART_DOMAIN_PADDING = 0.1

# Logging configuration
LOG_FILE = "logs/app.log"
DEFAULT_LOG_LEVEL = "INFO"
DEFAULT_LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)-30s | %(message)s"
DEFAULT_LOG_DATEFMT = "%Y-%m-%d %H:%M:%S"
DEFAULT_LOG_TIMEZONE = "UTC"

# Version information
VERSION = "1.0.0"

# Error messages
ERROR_PL_UNRESOLVABLE = "Invalid trade data: Unable to calculate P/L"
ERROR_TRADE_NOT_FOUND = "Trade not found"
