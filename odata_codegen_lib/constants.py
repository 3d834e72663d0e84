"""
Constants used throughout the OData code generator library.
"""

COLLECTION_PREFIX = "Collection("

# OData primitive names checked by exact equality in the type mapper
EDM_STRING = "Edm.String"
EDM_INTEGER_TYPES = ("Edm.Int32", "Edm.Int64")
EDM_NUMBER_TYPES = ("Edm.Decimal", "Edm.Double")
EDM_BOOLEAN = "Edm.Boolean"

# Infrastructure entities of Business Central that are never part of the generated API
DEFAULT_EXCLUDED_ENTITIES = (
    "company",
    "entityMetadata",
    "apicategoryroutes",
)

# Fields maintained by the server (auditing, versioning, number series)
DEFAULT_READ_ONLY_ON_CREATE = (
    "systemVersion",
    "timestamp",
    "systemCreatedAt",
    "systemCreatedBy",
    "systemModifiedAt",
    "systemModifiedBy",
    "lastModifiedDateTime",
    "entryNumber",
    "number",  # Often auto-generated
)

# Key fields are dropped from update types separately, see SchemaEmitter
DEFAULT_READ_ONLY_ON_UPDATE = DEFAULT_READ_ONLY_ON_CREATE

# Namespaces whose types are structured (complex/enum) rather than primitive
DEFAULT_COMPLEX_TYPE_PREFIXES = (
    "Microsoft.NAV",
)

DEFAULT_LANGUAGE = "typescript"
DEFAULT_OUTPUT_FILE = "schema.ts"

USER_AGENT = "OData-Codegen/1.0"
