"""
Selection of the entity types that have to be generated.
"""

import sys
from datetime import datetime
from typing import List, Optional

from .models import EntityType, Schema
from .policy import GenerationPolicy
from .type_mapper import navigation_target, unqualified_name


class ReachabilityResolver:
    """Computes the closed set of entity types exposed by a service.

    The start set is every entity type named by an entity set of the
    container. From there navigation properties are followed transitively,
    so that any type an API entity can point at is generated too. Excluded
    entities are never entered, even when reachable.

    The traversal uses an explicit stack and a visited set keyed by name.
    The visited set only grows and is bounded by the number of distinct
    names, which makes the walk terminate on cyclic graphs (bidirectional
    navigation is the norm in entity models). The result follows the
    schema's declaration order, never the traversal order.
    """

    def __init__(self, policy: Optional[GenerationPolicy] = None, verbose: bool = False):
        self.policy = policy or GenerationPolicy()
        self.verbose = verbose
        self.diagnostics: List[str] = []

    def _log_verbose(self, message: str):
        """Prints message to stderr only if verbose mode is enabled."""
        if self.verbose:
            timestamp = datetime.now().strftime('%Y-%m-%d %H:%M:%S.%f')[:-3]
            print(f"[{timestamp} Resolver VERBOSE] {message}", file=sys.stderr)

    def _diagnose(self, message: str):
        self.diagnostics.append(message)
        self._log_verbose(message)

    def api_entities(self, schema: Schema) -> List[str]:
        """Unqualified entity type names named by entity sets, minus excluded ones."""
        names = []
        for entity_set in schema.entity_container.entity_sets:
            name = unqualified_name(entity_set.entity_type)
            if self.policy.is_excluded_entity(name):
                self._log_verbose(f"Entity set '{entity_set.name}' references excluded entity '{name}', skipping.")
                continue
            if name not in names:
                names.append(name)
        return names

    def visit(self, schema: Schema) -> List[str]:
        """Walk navigation properties from the API entities; returns names in visit order."""
        by_name = {}
        for entity_type in schema.entity_types:
            by_name.setdefault(entity_type.name, entity_type)

        visited = set()
        order = []
        stack = list(reversed(self.api_entities(schema)))
        while stack:
            name = stack.pop()
            if name in visited:
                continue
            visited.add(name)
            order.append(name)

            entity_type = by_name.get(name)
            if entity_type is None:
                self._diagnose(f"Entity type '{name}' is referenced but not declared in the schema; skipping.")
                continue

            # Reversed so that the first navigation property is visited first
            for nav_prop in reversed(entity_type.navigation_properties):
                target = navigation_target(nav_prop.type)
                if target == name or self.policy.is_excluded_entity(target):
                    continue
                if target not in visited:
                    stack.append(target)
        return order

    def resolve(self, schema: Schema) -> List[EntityType]:
        """Entity types to generate, in schema declaration order."""
        self.diagnostics = []
        reachable = set(self.visit(schema))

        result = []
        seen = set()
        for entity_type in schema.entity_types:
            name = entity_type.name
            if name not in reachable or self.policy.is_excluded_entity(name):
                continue
            if name in seen:
                self._diagnose(f"Entity type '{name}' is declared more than once; keeping the first declaration.")
                continue
            seen.add(name)
            result.append(entity_type)

        self._log_verbose(f"Resolved {len(result)} of {len(schema.entity_types)} entity types for generation.")
        return result

    def resolve_names(self, schema: Schema) -> List[str]:
        return [entity_type.name for entity_type in self.resolve(schema)]
