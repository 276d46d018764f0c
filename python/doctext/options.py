"""Reader configuration: comment marker, key filters and extra entities.

Options can be built in code or loaded from YAML::

    marker: default
    whitelist:
      - name
      - regex: "^server\\."
    blacklist:
      - internal
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Union

import yaml

from .types import EntitySpec

DEFAULT_MARKER = "default"

KeyPattern = Union[str, "re.Pattern[str]"]


@dataclass
class DoctextOptions:
    marker: str = DEFAULT_MARKER
    whitelist: list[KeyPattern] = field(default_factory=list)
    blacklist: list[KeyPattern] = field(default_factory=list)
    entities: dict[str, EntitySpec] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: dict) -> DoctextOptions:
        """Build options from a plain mapping (as loaded from YAML)."""
        marker = data.get("marker", DEFAULT_MARKER)
        if not isinstance(marker, str) or not marker:
            raise ValueError("marker must be a non-empty string")
        return cls(
            marker=marker,
            whitelist=_parse_patterns(data.get("whitelist"), "whitelist"),
            blacklist=_parse_patterns(data.get("blacklist"), "blacklist"),
        )

    @classmethod
    def from_yaml(cls, text: str) -> DoctextOptions:
        try:
            data = yaml.safe_load(text)
        except yaml.YAMLError as e:
            raise ValueError(f"Invalid options YAML: {e}") from e
        if data is None:
            return cls()
        if not isinstance(data, dict):
            raise ValueError("Options YAML must be a mapping")
        return cls.from_dict(data)


def load_options(path: Path) -> DoctextOptions:
    """Load options from a YAML file."""
    return DoctextOptions.from_yaml(Path(path).read_text())


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------

def _parse_patterns(raw: object, name: str) -> list[KeyPattern]:
    if raw is None:
        return []
    if not isinstance(raw, list):
        raise ValueError(f"{name} must be a list")

    patterns: list[KeyPattern] = []
    for item in raw:
        if isinstance(item, str):
            patterns.append(item)
        elif isinstance(item, dict) and isinstance(item.get("regex"), str):
            try:
                patterns.append(re.compile(item["regex"]))
            except re.error as e:
                raise ValueError(f"Invalid {name} regex {item['regex']!r}: {e}") from e
        else:
            raise ValueError(f"Invalid {name} entry: {item!r}")
    return patterns
