"""Application-wide constants for keyauth-provider.

Constants that define application behavior.
For user-configurable settings per deployment, see config.py.
"""

import os

from platformdirs import user_config_dir

# ============================================================================
# Configuration Location
# ============================================================================

APP_NAME: str = "keyauth-provider"

# Platform-specific paths:
# - macOS: ~/Library/Application Support/keyauth-provider/
# - Linux: ~/.config/keyauth-provider/
# - Windows: %APPDATA%\keyauth-provider\
CONFIG_DIR: str = os.path.realpath(user_config_dir(APP_NAME))

CONFIG_FILENAME: str = "keyauth_provider_config.json"

# Environment variable that overrides the config file location
CONFIG_PATH_ENV_VAR: str = "KEYAUTH_PROVIDER_CONFIG"

# Subdirectory created inside the user's log_dir
LOGS_SUBDIR: str = "keyauth_provider_logs"

# ============================================================================
# Tokens
# ============================================================================

# Bytes of randomness per token (hex encoded, so tokens are twice as long)
TOKEN_BYTES: int = 32

# Default lifetime of a site record (seconds). Handshakes are interactive,
# ten minutes covers a slow login plus the consumer's validate call.
DEFAULT_TOKEN_TTL_SECONDS: int = 600

# ============================================================================
# Consumer Profile Fetching
# ============================================================================

# Timeout for GET http://consumer/about (seconds)
DEFAULT_CONSUMER_TIMEOUT_SECONDS: float = 5.0
MIN_CONSUMER_TIMEOUT_SECONDS: float = 0.1
MAX_CONSUMER_TIMEOUT_SECONDS: float = 60.0

# Port used when a consumer id has no ":port" segment
DEFAULT_CONSUMER_PORT: int = 80

# Path queried on the consumer for its public profile
CONSUMER_ABOUT_PATH: str = "/about"

# Larger profile bodies are treated as malformed
MAX_CONSUMER_PROFILE_BYTES: int = 64 * 1024

# ============================================================================
# HTTP Surface
# ============================================================================

DEFAULT_HOST: str = "127.0.0.1"
DEFAULT_PORT: int = 8080

# Path on the consumer that receives the browser after a successful login
DEFAULT_CALLBACK_PATH: str = "/login/callback"

DEFAULT_TEMPLATE: str = "login.html"

# Max inbound request size (64 KiB is plenty for a passphrase form)
MAX_REQUEST_SIZE: int = 64 * 1024

PUBLIC_KEY_MEDIA_TYPE: str = "application/x-pem-file"
