"""
Field declarations.

A field declaration describes one property of a resource type, without
knowing the name of the property yet.  Declarations are immutable; builder
methods return a modified copy, so they can be chained::

    fields = {
        "title": Attribute(),
        "createdAt": DateAttribute().serialize_as("created").read_only(),
        "author": ToOneRelationship(Person),
    }

Names are given by :py:func:`jsonapi_fields.binding.fields_from_mapping`.
"""

import dataclasses
import datetime
import enum
import typing
import urllib.parse

from .dateformat import ISO8601_PATTERN, DatePattern, compile_pattern
from .deferred import Deferred, resolve

T = typing.TypeVar("T", bound="Field")


class FieldKind(enum.Enum):
    ATTRIBUTE = "attribute"
    URL_ATTRIBUTE = "url_attribute"
    DATE_ATTRIBUTE = "date_attribute"
    TO_ONE = "to_one"
    TO_MANY = "to_many"


class RelationshipType(enum.Enum):
    TO_ONE = "to_one"
    TO_MANY = "to_many"


@dataclasses.dataclass(frozen=True, init=False)
class Field:
    """
    Base field.
    Do not use this class directly, instead use one of the concrete subclasses.
    """

    kind: typing.ClassVar[FieldKind]

    serialized_name_override: typing.Optional[str] = None
    """
    The key of the field in the JSON representation, if it differs from the property name.
    """
    is_read_only: bool = False
    """
    Set to :py:const:`True` if the field is never written back to the JSON representation.
    """

    def serialize_as(self: T, name: str) -> T:
        """
        Returns a copy of the field that is serialized under ``name``.

        :param str name: the serialized name to use.
        """
        return dataclasses.replace(self, serialized_name_override=name)

    def read_only(self: T) -> T:
        """
        Returns a read-only copy of the field.
        """
        return dataclasses.replace(self, is_read_only=True)

    def __init__(
        self,
        *,
        serialized_name_override: typing.Optional[str] = None,
        is_read_only: bool = False,
    ):
        if getattr(type(self), "kind", None) is None:
            raise TypeError(f"{type(self).__name__} cannot be instantiated directly")
        object.__setattr__(self, "serialized_name_override", serialized_name_override)
        object.__setattr__(self, "is_read_only", is_read_only)


@dataclasses.dataclass(frozen=True, init=False)
class Attribute(Field):
    """
    A basic attribute field.
    """

    kind = FieldKind.ATTRIBUTE


@dataclasses.dataclass(frozen=True, init=False)
class URLAttribute(Attribute):
    """
    An attribute that holds a URL.
    Relative URLs are made absolute against ``base_url`` if it is given.
    """

    kind = FieldKind.URL_ATTRIBUTE

    base_url: typing.Optional[str] = None

    def resolve(self, value: str) -> str:
        if self.base_url is None:
            return value
        return urllib.parse.urljoin(self.base_url, value)

    def __init__(
        self,
        base_url: typing.Optional[str] = None,
        *,
        serialized_name_override: typing.Optional[str] = None,
        is_read_only: bool = False,
    ):
        super().__init__(
            serialized_name_override=serialized_name_override, is_read_only=is_read_only
        )
        object.__setattr__(self, "base_url", base_url)


@dataclasses.dataclass(frozen=True, init=False)
class DateAttribute(Attribute):
    """
    An attribute that holds a date.
    By default, it uses the ISO 8601 pattern ``yyyy-MM-dd'T'HH:mm:ss.SSSZZZZZ``.

    :param str format: the date pattern used for both parsing and rendering.
    :raises InvalidDeclarationError: if ``format`` is not a supported pattern.
    """

    kind = FieldKind.DATE_ATTRIBUTE

    format: str = ISO8601_PATTERN

    @property
    def pattern(self) -> DatePattern:
        return compile_pattern(self.format)

    def parse(self, value: str) -> datetime.datetime:
        return self.pattern.parse(value)

    def render(self, value: typing.Union[datetime.datetime, datetime.date]) -> str:
        return self.pattern.render(value)

    def __init__(
        self,
        format: str = ISO8601_PATTERN,
        *,
        serialized_name_override: typing.Optional[str] = None,
        is_read_only: bool = False,
    ):
        super().__init__(
            serialized_name_override=serialized_name_override, is_read_only=is_read_only
        )
        compile_pattern(format)
        object.__setattr__(self, "format", format)


@dataclasses.dataclass(frozen=True, init=False)
class Relationship(Field):
    """
    A basic relationship field.
    Do not use this class directly, instead use either :py:class:`ToOneRelationship`
    or :py:class:`ToManyRelationship`.

    :param target: the resource type the relationship points to,
                   or a :py:class:`Deferred` that yields it.
    """

    type: typing.ClassVar[RelationshipType]

    target: typing.Any = None

    @property
    def linked_type(self) -> typing.Any:
        """
        The resource type the relationship points to.
        """
        return resolve(self.target)

    def __init__(
        self,
        target: typing.Union[typing.Any, Deferred[typing.Any]],
        *,
        serialized_name_override: typing.Optional[str] = None,
        is_read_only: bool = False,
    ):
        super().__init__(
            serialized_name_override=serialized_name_override, is_read_only=is_read_only
        )
        object.__setattr__(self, "target", target)


@dataclasses.dataclass(frozen=True, init=False)
class ToOneRelationship(Relationship):
    kind = FieldKind.TO_ONE
    type = RelationshipType.TO_ONE


@dataclasses.dataclass(frozen=True, init=False)
class ToManyRelationship(Relationship):
    kind = FieldKind.TO_MANY
    type = RelationshipType.TO_MANY
