"""
Schema emitters that turn resolved entity types into target-language source.
"""

import sys
from abc import ABC, abstractmethod
from datetime import datetime
from io import StringIO
from typing import Dict, List, Optional, Type

from .errors import UnsupportedLanguageError
from .models import EntityType, Model, NavigationProperty, Property, Schema
from .policy import GenerationPolicy
from .reachability import ReachabilityResolver
from .type_mapper import TypeMapper, is_collection, is_complex_type, zod_type_mapper


def to_pascal_case(name: str) -> str:
    if not name:
        return name
    return name[:1].upper() + name[1:]


def to_camel_case(name: str) -> str:
    if not name:
        return name
    return name[:1].lower() + name[1:]


class SchemaEmitter(ABC):
    """Base class for a target backend.

    The emitter resolves the entity types to generate, writes a preamble and
    then one base schema per entity, followed by the create and update input
    types of each entity. All passes walk the same resolved list, so the
    output is stable for identical input.

    Subclasses must implement the abstract ``write_*`` hooks; field
    selection (complex types, read-only fields, keys) is shared here.
    """

    language: str = ""
    file_extension: str = ""

    def __init__(self, policy: Optional[GenerationPolicy] = None, verbose: bool = False):
        self.policy = policy or GenerationPolicy()
        self.verbose = verbose
        self.resolver = ReachabilityResolver(self.policy, verbose=verbose)
        self.diagnostics: List[str] = []
        self._complex_prefixes = tuple(self.policy.complex_type_prefixes)
        self._out = StringIO()

    def _log_verbose(self, message: str):
        """Prints message to stderr only if verbose mode is enabled."""
        if self.verbose:
            timestamp = datetime.now().strftime('%Y-%m-%d %H:%M:%S.%f')[:-3]
            print(f"[{timestamp} Emitter VERBOSE] {message}", file=sys.stderr)

    def _diagnose(self, message: str):
        self.diagnostics.append(message)
        self._log_verbose(message)

    def writeln(self, text: str = ""):
        self._out.write(text + "\n")

    def emit(self, model: Model) -> str:
        """Generate the complete output text for a parsed model."""
        schema = model.schema_
        self._out = StringIO()
        self.diagnostics = []
        self._complex_prefixes = tuple(self.policy.complex_type_prefixes)
        if schema.namespace and schema.namespace not in self._complex_prefixes:
            self._complex_prefixes += (schema.namespace,)

        entities = self.resolver.resolve(schema)
        self.diagnostics.extend(self.resolver.diagnostics)
        self._log_verbose(f"Emitting {self.language} for {len(entities)} entity types...")

        self.write_header(schema)
        for entity in entities:
            self.write_entity_type(entity, self.base_properties(entity))
        for entity in entities:
            self.write_create_type(entity, self.create_properties(entity))
            self.write_update_type(entity, self.update_properties(entity))

        self._log_verbose("Emission complete.")
        return self._out.getvalue()

    def is_complex_property(self, prop: Property) -> bool:
        return is_complex_type(prop.type, self._complex_prefixes)

    def base_properties(self, entity: EntityType) -> List[Property]:
        """Properties of the base schema; complex-typed ones are dropped."""
        properties = []
        for prop in entity.properties:
            if self.is_complex_property(prop):
                self._diagnose(f"Skipping complex property '{entity.name}.{prop.name}' of type '{prop.type}'.")
                continue
            properties.append(prop)
        return properties

    def create_properties(self, entity: EntityType) -> List[Property]:
        return [
            prop for prop in entity.properties
            if not self.is_complex_property(prop) and not self.policy.is_read_only_on_create(prop.name)
        ]

    def update_properties(self, entity: EntityType) -> List[Property]:
        # Identity is immutable once created
        key_names = entity.key_names()
        return [
            prop for prop in entity.properties
            if not self.is_complex_property(prop)
            and not self.policy.is_read_only_on_update(prop.name)
            and prop.name not in key_names
        ]

    @abstractmethod
    def write_header(self, schema: Schema):
        """Write the preamble shared by all generated types."""
        pass

    @abstractmethod
    def write_entity_type(self, entity: EntityType, properties: List[Property]):
        """Write the base schema of one entity."""
        pass

    @abstractmethod
    def write_create_type(self, entity: EntityType, properties: List[Property]):
        """Write the create input type of one entity."""
        pass

    @abstractmethod
    def write_update_type(self, entity: EntityType, properties: List[Property]):
        """Write the update input type of one entity."""
        pass


class ZodEmitter(SchemaEmitter):
    """TypeScript backend producing Zod schemas and plain input types."""

    language = "typescript"
    file_extension = ".ts"

    def __init__(self, policy: Optional[GenerationPolicy] = None, verbose: bool = False,
                 type_mapper: Optional[TypeMapper] = None):
        super().__init__(policy, verbose)
        self.type_mapper = type_mapper or zod_type_mapper()

    def write_header(self, schema: Schema):
        self.writeln('import { z } from "zod";')
        self.writeln()
        self.writeln('// Branded primitive types')
        self.writeln('const Guid = z.string().brand<"Guid">();')
        self.writeln('const DateTime = z.string().brand<"DateTime">();')
        self.writeln('const DateOnly = z.string().brand<"DateOnly">();')
        self.writeln()
        self.writeln('// Generic reference types')
        self.writeln('const RefOne = z.object({ id: Guid });')
        self.writeln('const RefMany = z.array(RefOne);')
        self.writeln()
        self.writeln('export type RefOne = z.infer<typeof RefOne>;')
        self.writeln('export type RefMany = z.infer<typeof RefMany>;')
        self.writeln()

    def write_entity_type(self, entity: EntityType, properties: List[Property]):
        schema_name = to_pascal_case(entity.name)

        self.writeln(f"export const {schema_name} = z.object({{")
        for prop in properties:
            self.write_property(prop)
        # Relationships are plain references for now, not nested schemas
        for nav_prop in entity.navigation_properties:
            self.write_navigation_property(nav_prop)
        self.writeln("});")
        self.writeln()
        self.writeln(f"export type {schema_name} = z.infer<typeof {schema_name}>;")
        self.writeln()

    def write_property(self, prop: Property):
        zod_type = self.type_mapper.schema_for(prop.type)
        if prop.is_nullable():
            zod_type += ".optional()"
        self.writeln(f"  {to_camel_case(prop.name)}: {zod_type},")

    def write_navigation_property(self, nav_prop: NavigationProperty):
        ref = "RefMany" if is_collection(nav_prop.type) else "RefOne"
        self.writeln(f"  {to_camel_case(nav_prop.name)}: {ref}.optional(),")

    def write_input_type(self, type_name: str, properties: List[Property]):
        # Every input field is optional; the service applies its own defaults
        self.writeln(f"export type {type_name} = {{")
        for prop in properties:
            self.writeln(f"  {to_camel_case(prop.name)}?: {self.type_mapper.annotation_for(prop.type)};")
        self.writeln("};")
        self.writeln()

    def write_create_type(self, entity: EntityType, properties: List[Property]):
        self.write_input_type(f"{to_pascal_case(entity.name)}Create", properties)

    def write_update_type(self, entity: EntityType, properties: List[Property]):
        self.write_input_type(f"{to_pascal_case(entity.name)}Update", properties)


EMITTERS: Dict[str, Type[SchemaEmitter]] = {
    ZodEmitter.language: ZodEmitter,
}


def supported_languages() -> List[str]:
    return list(EMITTERS)


def get_emitter(language: str, policy: Optional[GenerationPolicy] = None, verbose: bool = False) -> SchemaEmitter:
    """Instantiate the emitter registered for a target language."""
    emitter_class = EMITTERS.get(language)
    if emitter_class is None:
        raise UnsupportedLanguageError(language, supported_languages())
    return emitter_class(policy=policy, verbose=verbose)
