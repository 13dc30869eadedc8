"""Identity resolution from a static mapping."""

import json
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

import structlog

from ..exceptions import InvalidConfigError, MissingConfigError
from ..markup.context import Identity
from ..markup.dialects import Dialect

logger = structlog.get_logger()


class MappingIdentityResolver:
    """Resolves identifiers from a ``{platform: {identifier: identity}}`` mapping.

    Identities are dicts with any of ``mention_token``, ``profile_url`` and
    ``display_name``. A bare string is shorthand for a mention token.

    Identifiers may be qualified with their source platform
    (``"github:bob"``), which takes precedence over the bare form (``"bob"``)
    when both are present.
    """

    def __init__(self, mapping: Mapping[str, Mapping[str, Any]]) -> None:
        self._identities: Dict[str, Dict[str, Identity]] = {}
        for platform, users in mapping.items():
            self._identities[platform] = {
                identifier: self._parse_identity(platform, identifier, value)
                for identifier, value in users.items()
            }

    @staticmethod
    def _parse_identity(platform: str, identifier: str, value: Any) -> Identity:
        if isinstance(value, str):
            return Identity(mention_token=value)
        if isinstance(value, dict):
            return Identity(
                mention_token=value.get("mention_token"),
                profile_url=value.get("profile_url"),
                display_name=value.get("display_name"),
            )
        raise InvalidConfigError(
            f"Invalid identity for {platform}/{identifier}: expected a string or an object"
        )

    def resolve(
        self, platform: Dialect, identifier: str, source: Optional[Dialect] = None
    ) -> Optional[Identity]:
        users = self._identities.get(platform.value, {})
        if source is not None:
            qualified = users.get(f"{source.value}:{identifier}")
            if qualified is not None:
                return qualified
        return users.get(identifier)

    def __len__(self) -> int:
        return sum(len(users) for users in self._identities.values())


def load_identity_mapping(path: Path) -> MappingIdentityResolver:
    """Load identities from a JSON file, keyed by target platform name."""
    if not Path(path).is_file():
        raise MissingConfigError(f"Identities file does not exist: {path}")
    try:
        with open(path) as f:
            data = json.load(f)
    except OSError as e:
        raise InvalidConfigError(f"Cannot read identities file {path}: {e}")
    except json.JSONDecodeError as e:
        raise InvalidConfigError(f"Identities file is not valid JSON: {e}")

    if not isinstance(data, dict) or not all(isinstance(v, dict) for v in data.values()):
        raise InvalidConfigError(
            "Identities file must map platform names to objects. "
            'Format: {"slack": {"octocat": "<@U123>"}}'
        )

    valid = {d.value for d in Dialect}
    unknown = set(data) - valid
    if unknown:
        raise InvalidConfigError(
            f"Unknown platforms in identities file: {sorted(unknown)}; "
            f"expected any of {sorted(valid)}"
        )

    resolver = MappingIdentityResolver(data)
    logger.info("Identities loaded", path=str(path), count=len(resolver))
    return resolver
