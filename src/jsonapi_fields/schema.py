import collections.abc
import logging
import typing
from collections import OrderedDict

from .binding import BoundField, fields_from_mapping
from .exceptions import InvalidDeclarationError, UnknownResourceTypeError
from .fields import Field, Relationship
from .formatting import AsIsKeyFormatter, KeyFormatter

logger = logging.getLogger(__name__)


class ResourceSchema:
    """
    A :py:class:`ResourceSchema` holds the fields of a JSON:API resource type.

    :param str type_name: the value of the ``type`` member of the resource objects.
    :param fields: either a mapping of property names to field declarations,
                   or already bound fields.
    :param Optional[KeyFormatter] key_formatter: the formatter used to compute wire keys.
                                                 Defaults to :py:class:`AsIsKeyFormatter`.
    """

    type_name: str
    key_formatter: KeyFormatter
    _fields: typing.Mapping[str, BoundField]

    @property
    def fields(self) -> typing.Mapping[str, BoundField]:
        """
        The mapping of property names to :py:class:`BoundField`s, in declaration order.
        """
        return self._fields

    @property
    def attributes(self) -> typing.Mapping[str, BoundField]:
        return OrderedDict((k, f) for k, f in self._fields.items() if f.is_attribute)

    @property
    def relationships(self) -> typing.Mapping[str, BoundField]:
        return OrderedDict((k, f) for k, f in self._fields.items() if f.is_relationship)

    def field(self, name: str) -> BoundField:
        try:
            return self._fields[name]
        except KeyError:
            raise KeyError(f'resource "{self.type_name}" has no field named "{name}"')

    def wire_key(
        self,
        field: typing.Union[str, BoundField],
        formatter: typing.Optional[KeyFormatter] = None,
    ) -> str:
        """
        Returns the key under which ``field`` appears in the JSON representation.

        :param field: a field or the name of a field of this resource.
        :param Optional[KeyFormatter] formatter: overrides the schema's key formatter.
        """
        if isinstance(field, str):
            field = self.field(field)
        return (formatter or self.key_formatter).format(field)

    def wire_keys(
        self, formatter: typing.Optional[KeyFormatter] = None
    ) -> typing.Mapping[str, BoundField]:
        """
        Returns the mapping of wire keys to fields.
        Fields whose wire keys collide are not detected; the last one wins.
        """
        return OrderedDict((self.wire_key(f, formatter), f) for f in self._fields.values())

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.type_name!r}, fields=[{', '.join(self._fields)}])"

    def __init__(
        self,
        type_name: str,
        fields: typing.Union[typing.Mapping[str, Field], typing.Iterable[BoundField]] = (),
        key_formatter: typing.Optional[KeyFormatter] = None,
    ):
        if not type_name:
            raise InvalidDeclarationError("a resource type must have a name")
        bound: typing.Iterable[BoundField]
        if isinstance(fields, collections.abc.Mapping):
            bound = fields_from_mapping(fields)
        else:
            bound = list(fields)
            for f in bound:
                if not isinstance(f, BoundField):
                    raise InvalidDeclarationError(
                        f"resource {type_name!r} is given {f!r}, which is not a bound field; "
                        "pass a mapping of names to fields instead"
                    )
        self.type_name = type_name
        self.key_formatter = key_formatter if key_formatter is not None else AsIsKeyFormatter()
        self._fields = OrderedDict((f.name, f) for f in bound)


class SchemaRegistry:
    """
    A :py:class:`SchemaRegistry` keeps track of resource schemas, by type name and
    by the native class they describe.
    """

    schemas: typing.Dict[str, ResourceSchema]
    schemas_by_native_class: typing.Dict[typing.Type, ResourceSchema]

    def register(
        self, schema: ResourceSchema, native_class: typing.Optional[typing.Type] = None
    ) -> ResourceSchema:
        if schema.type_name in self.schemas:
            raise InvalidDeclarationError(f'resource "{schema.type_name}" is already registered')
        if native_class is not None and native_class in self.schemas_by_native_class:
            raise InvalidDeclarationError(
                f"{native_class.__qualname__} is already registered as resource "
                f'"{self.schemas_by_native_class[native_class].type_name}"'
            )
        self.schemas[schema.type_name] = schema
        if native_class is not None:
            self.schemas_by_native_class[native_class] = schema
        logger.debug("registered resource %s", schema.type_name)
        return schema

    def query_schema_by_type_name(self, name: str) -> ResourceSchema:
        try:
            return self.schemas[name]
        except KeyError:
            raise UnknownResourceTypeError(name)

    def query_schema_by_native_class(self, class_: typing.Type) -> ResourceSchema:
        try:
            return self.schemas_by_native_class[class_]
        except KeyError:
            raise UnknownResourceTypeError(class_.__name__)

    def resolve_linked_schema(
        self, field: typing.Union[BoundField, Relationship]
    ) -> ResourceSchema:
        """
        Returns the schema of the resource type a relationship points to.
        The relationship's linked type may be a :py:class:`ResourceSchema`, a registered
        native class, or a type name.
        """
        decl = field.field if isinstance(field, BoundField) else field
        if not isinstance(decl, Relationship):
            raise TypeError(f"{decl!r} is not a relationship")
        linked_type = decl.linked_type
        if isinstance(linked_type, ResourceSchema):
            return linked_type
        elif isinstance(linked_type, str):
            return self.query_schema_by_type_name(linked_type)
        elif isinstance(linked_type, type):
            return self.query_schema_by_native_class(linked_type)
        raise UnknownResourceTypeError(repr(linked_type))

    def __contains__(self, name: str) -> bool:
        return name in self.schemas

    def __iter__(self) -> typing.Iterator[ResourceSchema]:
        return iter(self.schemas.values())

    def __init__(self):
        self.schemas = {}
        self.schemas_by_native_class = {}
