"""Fixed endpoint, timing and wire constants for the quote stream."""

# Public ticker feed of the quote service
DEFAULT_WS_URL = "wss://api.exchange.bitcoin.com/api/2/ws"

# Single timing constant: throttle window and reconnect delay (seconds)
UPDATE_INTERVAL = 1.0

# Outbound request ids. 1 is reserved for the catalog request; subscribe
# requests count up from 2 within a connection.
CATALOG_REQUEST_ID = 1
FIRST_SUBSCRIBE_ID = 2

METHOD_GET_SYMBOLS = "getSymbols"
METHOD_SUBSCRIBE_TICKER = "subscribeTicker"
METHOD_TICKER = "ticker"

# Numeric tick fields, in display order
TICK_FIELDS = ("bid", "ask", "high", "low", "last")

# Text stored for a field that failed numeric parsing, and how it renders
NAN_MARKER = "NaN"
NAN_DISPLAY = "---"
