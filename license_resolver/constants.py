"""Constants for license-resolver."""

from license_resolver import __version__

# Exit codes
EXIT_SUCCESS = 0  # Every dependency resolved
EXIT_UNRESOLVED = 1  # At least one dependency has no license text
EXIT_ERROR = 2  # Resolution failed due to error

# HTTP defaults
DEFAULT_TIMEOUT = 30.0
DEFAULT_USER_AGENT = f"license-resolver/{__version__}"
MAX_CONCURRENT_REQUESTS = 10

# https://docs.github.com/en/rest/overview/resources-in-the-rest-api#user-agent-required
GITHUB_API_BASE_URL = "https://api.github.com"
GITHUB_RAW_BASE_URL = "https://raw.githubusercontent.com"

# Environment variable holding the bearer credential for API calls
GITHUB_TOKEN_ENV = "GITHUB_TOKEN"
