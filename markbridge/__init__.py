"""MarkBridge.

A markup translation engine that mirrors pull request conversations between
GitHub, Bitbucket and Slack, converting text formatting, emoji aliases,
mentions and short cross-references between their markup dialects.

Features:
- Environment-based configuration with Pydantic validation
- One entry point per supported dialect pair
- Permissive fallback on every identity lookup failure
- Message-length budget enforcement for Slack
"""

__version__ = "1.0.0"
__license__ = "MIT"
