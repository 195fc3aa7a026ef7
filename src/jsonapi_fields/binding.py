import dataclasses
import datetime
import logging
import typing

from .exceptions import InvalidDeclarationError, ValueConversionError
from .fields import (
    DateAttribute,
    Field,
    FieldKind,
    Relationship,
    RelationshipType,
    URLAttribute,
)

logger = logging.getLogger(__name__)

F = typing.TypeVar("F", bound=Field)


@dataclasses.dataclass(frozen=True)
class BoundField(typing.Generic[F]):
    """
    A :py:class:`BoundField` is a field declaration together with the name of the
    property it is declared for.  Instances are created by :py:func:`fields_from_mapping`.
    """

    name: str
    """
    The name of the field as it appears in the model.
    """
    field: F
    """
    The declaration.
    """

    @property
    def serialized_name(self) -> str:
        """
        The name of the field as it appears in the JSON representation,
        before it goes through a key formatter.
        """
        override = self.field.serialized_name_override
        return override if override is not None else self.name

    @property
    def is_read_only(self) -> bool:
        return self.field.is_read_only

    @property
    def kind(self) -> FieldKind:
        return self.field.kind

    @property
    def is_relationship(self) -> bool:
        return isinstance(self.field, Relationship)

    @property
    def is_attribute(self) -> bool:
        return not self.is_relationship

    @property
    def relationship_type(self) -> typing.Optional[RelationshipType]:
        if isinstance(self.field, Relationship):
            return self.field.type
        return None

    def parse_value(self, value: typing.Any) -> typing.Any:
        """
        Converts a value found in the JSON representation into the model's value,
        according to the field's kind.  Relationships and plain attributes pass through.

        :raises ValueConversionError: if the value cannot be converted.
        """
        if value is None:
            return None
        if isinstance(self.field, DateAttribute):
            if not isinstance(value, str):
                raise ValueConversionError(value, "a date must be given as a string", self)
            try:
                return self.field.parse(value)
            except ValueConversionError as e:
                raise ValueConversionError(value, e.reason, self) from e
        elif isinstance(self.field, URLAttribute):
            if not isinstance(value, str):
                raise ValueConversionError(value, "a URL must be given as a string", self)
            return self.field.resolve(value)
        return value

    def render_value(self, value: typing.Any) -> typing.Any:
        """
        Converts a model's value into the value to put in the JSON representation.

        :raises ValueConversionError: if the value cannot be converted.
        """
        if value is None:
            return None
        if isinstance(self.field, DateAttribute):
            if not isinstance(value, datetime.date):
                raise ValueConversionError(value, "not a date or datetime", self)
            try:
                return self.field.render(value)
            except ValueConversionError as e:
                raise ValueConversionError(value, e.reason, self) from e
        return value

    def __post_init__(self):
        if not isinstance(self.name, str) or not self.name:
            raise InvalidDeclarationError(f"invalid field name: {self.name!r}")
        if not isinstance(self.field, Field):
            raise InvalidDeclarationError(
                f'field "{self.name}" is declared with {self.field!r}, which is not a Field'
            )


def fields_from_mapping(mapping: typing.Mapping[str, Field]) -> typing.List[BoundField]:
    """
    Binds each field declaration in ``mapping`` to the name it is declared under.

    The declarations are not altered in any way.  Serialized names are not checked
    for duplicates; callers that compose several field sets are responsible for that.

    :param Mapping[str, Field] mapping: the mapping of property names to declarations.
    :return: a list of :py:class:`BoundField`, in the iteration order of ``mapping``.
    :raises InvalidDeclarationError: if a name is empty or a value is not a :py:class:`Field`.
    """
    bound = [BoundField(name, field) for name, field in mapping.items()]
    logger.debug("bound %d field(s): %s", len(bound), ", ".join(f.name for f in bound))
    return bound
