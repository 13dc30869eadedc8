"""Application-wide defaults."""

# Slack API limit is 4000 characters, leave some buffer
DEFAULT_MAX_MESSAGE_LENGTH = 3900

# Identity and channel lookups
DEFAULT_IDENTITY_CACHE_TTL_SECONDS = 600

DEFAULT_GITHUB_HOST = "https://github.com"
DEFAULT_BITBUCKET_HOST = "https://bitbucket.org"
