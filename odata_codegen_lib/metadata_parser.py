"""
OData metadata parser that builds the metadata model from an EDMX document.
"""

import sys
from datetime import datetime
from pathlib import Path
from typing import List, Optional, Tuple, Union
import requests
from lxml import etree

from .constants import USER_AGENT
from .errors import ParseError, ReadError
from .models import (
    ComplexType,
    DataServices,
    EntityContainer,
    EntitySet,
    EntityType,
    EnumMember,
    EnumType,
    Key,
    Model,
    NavigationProperty,
    Property,
    PropertyRef,
    Schema,
)


def _local_name(element) -> Optional[str]:
    # Comments and processing instructions have non-string tags
    if not isinstance(element.tag, str):
        return None
    return etree.QName(element).localname


def _children(element, name: str) -> List:
    """Direct children whose local name matches, whatever their namespace."""
    return [child for child in element if _local_name(child) == name]


def _first_child(element, name: str):
    for child in element:
        if _local_name(child) == name:
            return child
    return None


def _attr(element, name: str, default=""):
    """Attribute by local name; unqualified attributes win over namespaced ones."""
    value = element.get(name)
    if value is not None:
        return value
    for key, value in element.attrib.items():
        if etree.QName(key).localname == name:
            return value
    return default


class MetadataParser:
    """Parses an OData (EDMX) metadata document into the metadata model.

    Elements are matched by local name so that documents with or without
    namespace prefixes (``edmx:Edmx`` or ``Edmx``) parse identically. No
    schema validation is performed: a well-formed but semantically odd
    document parses fine and is left to the resolver and emitter.
    """

    def __init__(self, verbose: bool = False):
        self.verbose = verbose

    def _log_verbose(self, message: str):
        """Prints message to stderr only if verbose mode is enabled."""
        if self.verbose:
            timestamp = datetime.now().strftime('%Y-%m-%d %H:%M:%S.%f')[:-3]
            print(f"[{timestamp} Parser VERBOSE] {message}", file=sys.stderr)

    def parse_file(self, path: Union[str, Path]) -> Model:
        """Read a metadata file in full and parse it.

        Raises:
            ReadError: If the file cannot be read.
            ParseError: If the content is not a well-formed Edmx document.
        """
        path = Path(path)
        self._log_verbose(f"Reading metadata from {path}...")
        try:
            data = path.read_bytes()
        except OSError as e:
            raise ReadError(str(path), e.strerror or str(e)) from e
        self._log_verbose(f"Read {len(data)} bytes.")
        return self.parse_bytes(data)

    def fetch(self, service_url: str, auth: Optional[Tuple[str, str]] = None, timeout: int = 60) -> Model:
        """Fetch ``$metadata`` from an OData service and parse it.

        Raises:
            ReadError: If the request fails or the service returns an error status.
            ParseError: If the response is not a well-formed Edmx document.
        """
        metadata_url = f"{service_url.rstrip('/')}/$metadata"
        session = requests.Session()
        if auth:
            session.auth = auth
        session.headers.update({
            'Accept': 'application/xml',
            'User-Agent': USER_AGENT
        })

        self._log_verbose(f"Fetching metadata from {metadata_url}...")
        try:
            response = session.get(metadata_url, timeout=timeout)
            response.raise_for_status()
        except requests.exceptions.RequestException as e:
            reason = str(e)
            if e.response is not None and e.response.status_code in [401, 403]:
                reason += " (authentication might be required or incorrect)"
            raise ReadError(metadata_url, reason) from e
        finally:
            session.close()
        self._log_verbose("Metadata fetched successfully.")
        return self.parse_bytes(response.content)

    def parse_bytes(self, data: Union[bytes, str]) -> Model:
        """Parse one XML document into a Model.

        Raises:
            ParseError: If the input is not well-formed XML or not an Edmx document.
        """
        if isinstance(data, str):
            data = data.encode('utf-8')

        # Never resolve external entities or touch the network
        parser = etree.XMLParser(resolve_entities=False, no_network=True, remove_comments=True)
        try:
            root = etree.fromstring(data, parser)
        except etree.XMLSyntaxError as e:
            raise ParseError(f"Metadata is not well-formed XML: {e.msg}", e.lineno) from e
        except ValueError as e:
            raise ParseError(f"Metadata could not be decoded: {e}") from e

        if _local_name(root) != 'Edmx':
            raise ParseError(f"Expected root element <Edmx>, found <{_local_name(root)}>")

        model = Model(data_services=self._parse_data_services(root))
        schema = model.schema_
        self._log_verbose(
            f"Parsing complete. Found {len(schema.entity_types)} entity types, "
            f"{len(schema.complex_types)} complex types, {len(schema.enum_types)} enum types, "
            f"{len(schema.entity_container.entity_sets)} entity sets."
        )
        return model

    def _parse_data_services(self, root) -> DataServices:
        data_services = _first_child(root, 'DataServices')
        if data_services is None:
            self._log_verbose("Warning: No DataServices element found in metadata.")
            return DataServices()

        schemas = _children(data_services, 'Schema')
        if not schemas:
            self._log_verbose("Warning: No Schema element found in metadata.")
            return DataServices()
        if len(schemas) > 1:
            self._log_verbose(f"Warning: Found {len(schemas)} Schema elements, only the first is used.")
        return DataServices(schema_=self._parse_schema(schemas[0]))

    def _parse_schema(self, schema_elem) -> Schema:
        container_elem = _first_child(schema_elem, 'EntityContainer')
        return Schema(
            namespace=_attr(schema_elem, 'Namespace'),
            entity_types=[self._parse_entity_type(e) for e in _children(schema_elem, 'EntityType')],
            complex_types=[self._parse_complex_type(e) for e in _children(schema_elem, 'ComplexType')],
            enum_types=[self._parse_enum_type(e) for e in _children(schema_elem, 'EnumType')],
            entity_container=self._parse_entity_container(container_elem) if container_elem is not None else EntityContainer(),
        )

    def _parse_entity_type(self, et_elem) -> EntityType:
        # --- Key Properties ---
        key_refs = []
        key_elem = _first_child(et_elem, 'Key')
        if key_elem is not None:
            key_refs = [PropertyRef(name=_attr(ref, 'Name')) for ref in _children(key_elem, 'PropertyRef')]

        return EntityType(
            name=_attr(et_elem, 'Name'),
            key=Key(property_refs=key_refs),
            properties=self._parse_properties(et_elem),
            navigation_properties=[
                NavigationProperty(
                    name=_attr(nav_elem, 'Name'),
                    type=_attr(nav_elem, 'Type'),
                    contains_target=_attr(nav_elem, 'ContainsTarget'),
                    partner=_attr(nav_elem, 'Partner'),
                )
                for nav_elem in _children(et_elem, 'NavigationProperty')
            ],
        )

    def _parse_properties(self, parent) -> List[Property]:
        return [
            Property(
                name=_attr(prop_elem, 'Name'),
                type=_attr(prop_elem, 'Type'),
                nullable=_attr(prop_elem, 'Nullable', None),
            )
            for prop_elem in _children(parent, 'Property')
        ]

    def _parse_complex_type(self, ct_elem) -> ComplexType:
        return ComplexType(name=_attr(ct_elem, 'Name'), properties=self._parse_properties(ct_elem))

    def _parse_enum_type(self, enum_elem) -> EnumType:
        return EnumType(
            name=_attr(enum_elem, 'Name'),
            members=[
                EnumMember(name=_attr(member, 'Name'), value=_attr(member, 'Value'))
                for member in _children(enum_elem, 'Member')
            ],
        )

    def _parse_entity_container(self, container_elem) -> EntityContainer:
        return EntityContainer(
            name=_attr(container_elem, 'Name'),
            entity_sets=[
                EntitySet(name=_attr(es_elem, 'Name'), entity_type=_attr(es_elem, 'EntityType'))
                for es_elem in _children(container_elem, 'EntitySet')
            ],
        )
