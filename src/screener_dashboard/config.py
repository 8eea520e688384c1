"""Configuration and URL constants for the Screener.in market dashboard.

The market page lists every industry with its aggregate metrics; the
relay and the CORS proxies below are alternate routes to the same page.
"""

BASE_URL = "https://www.screener.in"
MARKET_URL = f"{BASE_URL}/market/"

# Substring every genuine market page contains. Proxies sometimes answer
# 200 with an interstitial or an error page instead of the origin markup.
REQUIRED_MARKER = "Industry"

# Public CORS relays, tried in order after the direct request
PROXY_PREFIXES: tuple[str, ...] = (
    "https://api.allorigins.win/raw?url=",
    "https://corsproxy.io/?",
)

# Browser-like header set; the origin rejects obvious bot user agents
BROWSER_HEADERS: dict[str, str] = {
    "User-Agent": (
        "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 "
        "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
    ),
    "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
    "Accept-Language": "en-US,en;q=0.5",
}

# Retrieval limits
REQUEST_TIMEOUT_SECONDS = 15.0  # Per attempt, including body download
ATTEMPTS_PER_STRATEGY = 2
MAX_TOTAL_ATTEMPTS = 5  # Across all strategies
BACKOFF_MULTIPLIER = 0.5
BACKOFF_MAX_SECONDS = 4.0

# Relay server defaults
RELAY_HOST = "127.0.0.1"
RELAY_PORT = 8000
RELAY_PATH = "/api/screener"

# Minimum number of cells a market table row must have to carry data
MIN_ROW_CELLS = 10

# Placeholder for empty metric cells
MISSING_VALUE = "-"
