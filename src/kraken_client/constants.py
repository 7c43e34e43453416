# Default settings
DEFAULT_BASE_URL = "https://api.kraken.com"
DEFAULT_TIMEOUT_S = 30.0
DEFAULT_USER_AGENT = "kraken-client/0.1"

# Environment variables read by the credential loader
ENV_API_KEY = "KRAKEN_API_KEY"
ENV_SECRET_KEY = "KRAKEN_SECRET_KEY"

# Only these parameters travel in a private POST body
PRIVATE_BODY_FIELDS = ("nonce", "otp")
