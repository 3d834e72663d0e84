"""
OData Codegen Library - Generates Zod/TypeScript schemas from OData (EDMX) metadata.
"""

from .errors import (
    CodegenError,
    ReadError,
    ParseError,
    PolicyError,
    UnsupportedLanguageError
)
from .models import (
    Property,
    NavigationProperty,
    PropertyRef,
    Key,
    EntityType,
    ComplexType,
    EnumMember,
    EnumType,
    EntitySet,
    EntityContainer,
    Schema,
    DataServices,
    Model
)
from .policy import GenerationPolicy
from .metadata_parser import MetadataParser
from .reachability import ReachabilityResolver
from .type_mapper import ScalarKind, TypeDescriptor, MappedType, TypeMapper, classify, zod_type_mapper
from .emitter import SchemaEmitter, ZodEmitter, get_emitter, supported_languages
from .generator import CodeGenerator

__all__ = [
    'CodegenError',
    'ReadError',
    'ParseError',
    'PolicyError',
    'UnsupportedLanguageError',
    'Property',
    'NavigationProperty',
    'PropertyRef',
    'Key',
    'EntityType',
    'ComplexType',
    'EnumMember',
    'EnumType',
    'EntitySet',
    'EntityContainer',
    'Schema',
    'DataServices',
    'Model',
    'GenerationPolicy',
    'MetadataParser',
    'ReachabilityResolver',
    'ScalarKind',
    'TypeDescriptor',
    'MappedType',
    'TypeMapper',
    'classify',
    'zod_type_mapper',
    'SchemaEmitter',
    'ZodEmitter',
    'get_emitter',
    'supported_languages',
    'CodeGenerator'
]
