"""
Generation policy: which entities are hidden and which fields are read-only.

The policy is data handed to the resolver and the emitter, so callers can
generate for services other than Business Central without touching code.
A policy file is plain JSON::

    {
        "extend_defaults": true,
        "excluded_entities": ["dimensionSetLines"],
        "read_only_on_create": ["etag"],
        "read_only_on_update": ["etag"],
        "complex_type_prefixes": ["Contoso.Types"]
    }
"""

import json
from pathlib import Path
from typing import Any, Dict, FrozenSet, Tuple, Union

from pydantic import BaseModel, ConfigDict, ValidationError

from .constants import (
    DEFAULT_COMPLEX_TYPE_PREFIXES,
    DEFAULT_EXCLUDED_ENTITIES,
    DEFAULT_READ_ONLY_ON_CREATE,
    DEFAULT_READ_ONLY_ON_UPDATE,
)
from .errors import PolicyError, ReadError


class GenerationPolicy(BaseModel):
    model_config = ConfigDict(frozen=True, extra='forbid')

    excluded_entities: FrozenSet[str] = frozenset(DEFAULT_EXCLUDED_ENTITIES)
    read_only_on_create: FrozenSet[str] = frozenset(DEFAULT_READ_ONLY_ON_CREATE)
    read_only_on_update: FrozenSet[str] = frozenset(DEFAULT_READ_ONLY_ON_UPDATE)
    # Order matters only for readability of diagnostics, so a tuple is kept
    complex_type_prefixes: Tuple[str, ...] = DEFAULT_COMPLEX_TYPE_PREFIXES

    def is_excluded_entity(self, name: str) -> bool:
        return name in self.excluded_entities

    def is_read_only_on_create(self, name: str) -> bool:
        return name in self.read_only_on_create

    def is_read_only_on_update(self, name: str) -> bool:
        return name in self.read_only_on_update

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'GenerationPolicy':
        """
        Create a policy from a dictionary.

        Keys that are absent keep their defaults. With ``extend_defaults`` set,
        the given names are added to the defaults instead of replacing them.

        Raises:
            PolicyError: If the dictionary does not describe a valid policy.
        """
        if not isinstance(data, dict):
            raise PolicyError(f"Policy must be a JSON object, got {type(data).__name__}")

        data = dict(data)
        extend = data.pop('extend_defaults', False)
        if not isinstance(extend, bool):
            raise PolicyError("'extend_defaults' must be a boolean")

        values = {}
        defaults = cls()
        for field_name in cls.model_fields:
            if field_name not in data:
                continue
            names = data.pop(field_name)
            if not isinstance(names, list) or not all(isinstance(n, str) for n in names):
                raise PolicyError(f"'{field_name}' must be a list of strings")
            if extend:
                current = getattr(defaults, field_name)
                if isinstance(current, tuple):
                    names = list(current) + [n for n in names if n not in current]
                else:
                    names = list(current | set(names))
            values[field_name] = names

        if data:
            raise PolicyError(f"Unknown policy keys: {', '.join(sorted(data))}")

        try:
            return cls(**values)
        except ValidationError as e:
            raise PolicyError(f"Invalid policy: {e}") from e

    @classmethod
    def from_file(cls, policy_file: Union[str, Path]) -> 'GenerationPolicy':
        """Load a policy from a JSON file."""
        path = Path(policy_file)
        try:
            with open(path, 'r', encoding='utf-8') as f:
                content = f.read()
        except OSError as e:
            raise ReadError(str(path), e.strerror or str(e)) from e

        try:
            data = json.loads(content)
        except json.JSONDecodeError as e:
            raise PolicyError(f"Policy file {path} is not valid JSON: {e}") from e
        return cls.from_dict(data)
