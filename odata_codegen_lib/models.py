"""
Data models for OData (EDMX) metadata representation.

The models mirror the structure of the metadata document one-to-one and are
frozen once parsed; sequences are tuples, so downstream components only read them.
"""

from typing import List, Optional, Tuple
from pydantic import BaseModel, ConfigDict


class _FrozenModel(BaseModel):
    model_config = ConfigDict(frozen=True)


class Property(_FrozenModel):
    name: str = ""
    type: str = ""  # OData type descriptor (e.g., "Edm.String", "Collection(Edm.Guid)")
    nullable: Optional[str] = None  # Raw attribute: "true", "false" or absent

    def is_nullable(self) -> bool:
        # Absent means non-nullable for generation purposes
        return self.nullable == "true"


class NavigationProperty(_FrozenModel):
    name: str = ""
    type: str = ""
    contains_target: str = ""
    partner: str = ""


class PropertyRef(_FrozenModel):
    name: str = ""


class Key(_FrozenModel):
    property_refs: Tuple[PropertyRef, ...] = ()


class EntityType(_FrozenModel):
    name: str = ""
    key: Key = Key()
    properties: Tuple[Property, ...] = ()
    navigation_properties: Tuple[NavigationProperty, ...] = ()

    def key_names(self) -> List[str]:
        return [ref.name for ref in self.key.property_refs]


class ComplexType(_FrozenModel):
    name: str = ""
    properties: Tuple[Property, ...] = ()


class EnumMember(_FrozenModel):
    name: str = ""
    value: str = ""


class EnumType(_FrozenModel):
    name: str = ""
    members: Tuple[EnumMember, ...] = ()


class EntitySet(_FrozenModel):
    name: str = ""
    entity_type: str = ""  # Qualified type name, resolved by lookup


class EntityContainer(_FrozenModel):
    name: str = ""
    entity_sets: Tuple[EntitySet, ...] = ()


class Schema(_FrozenModel):
    namespace: str = ""
    entity_types: Tuple[EntityType, ...] = ()
    complex_types: Tuple[ComplexType, ...] = ()
    enum_types: Tuple[EnumType, ...] = ()
    entity_container: EntityContainer = EntityContainer()

    def find_entity_type(self, name: str) -> Optional[EntityType]:
        """Return the first entity type declared with the given unqualified name."""
        for entity_type in self.entity_types:
            if entity_type.name == name:
                return entity_type
        return None


class DataServices(_FrozenModel):
    schema_: Schema = Schema()


class Model(_FrozenModel):
    data_services: DataServices = DataServices()

    @property
    def schema_(self) -> Schema:
        return self.data_services.schema_
