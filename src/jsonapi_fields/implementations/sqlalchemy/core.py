import datetime
import typing
from collections import OrderedDict

import sqlalchemy as sa  # type: ignore
from sqlalchemy import orm  # type: ignore

from ...deferred import Deferred
from ...fields import (
    Attribute,
    DateAttribute,
    Field,
    Relationship,
    ToManyRelationship,
    ToOneRelationship,
)

DATE_PATTERN = "yyyy-MM-dd"


def python_type_of(column: sa.sql.ClauseElement) -> typing.Optional[typing.Type]:
    try:
        return column.type.python_type
    except (AttributeError, NotImplementedError):
        return None


def attribute_from_column_property(prop: orm.ColumnProperty) -> Field:
    typ = python_type_of(prop.expression)
    if typ is not None:
        if issubclass(typ, datetime.datetime):
            return DateAttribute()
        elif issubclass(typ, datetime.date):
            return DateAttribute(DATE_PATTERN)
    return Attribute()


def _target_class(prop: orm.RelationshipProperty) -> typing.Type:
    return prop.mapper.class_


def relationship_from_property(prop: orm.RelationshipProperty) -> Relationship:
    target = Deferred(_target_class, prop)
    if prop.uselist:
        return ToManyRelationship(target)
    else:
        return ToOneRelationship(target)


def is_primary_key(sa_mapper: orm.Mapper, prop: orm.ColumnProperty) -> bool:
    return any(c in sa_mapper.primary_key for c in prop.columns)


def fields_from_sqla_mapper(
    target: typing.Union[orm.Mapper, typing.Type],
    include_primary_key: bool = False,
) -> typing.Dict[str, Field]:
    """
    Derives field declarations from a SQLAlchemy mapper or a mapped class.

    * Columns become attributes; ``DateTime`` and ``Date`` columns become
      :py:class:`DateAttribute`\\ s.
    * Composite properties become plain attributes.
    * Relationships become :py:class:`ToManyRelationship` if they hold a collection,
      and :py:class:`ToOneRelationship` otherwise.  The linked type is the mapped
      class of the other side.

    Primary key columns are left out unless ``include_primary_key`` is set, since
    they end up as the ``id`` of the resource objects.

    :param target: a :py:class:`sqlalchemy.orm.Mapper` or a mapped class.
    :param bool include_primary_key: whether to include primary key columns.
    :return: the mapping of property names to field declarations.
    """
    sa_mapper = target if isinstance(target, orm.Mapper) else sa.inspect(target)
    fields: typing.Dict[str, Field] = OrderedDict()
    for prop in sa_mapper.attrs:
        if isinstance(prop, orm.RelationshipProperty):
            fields[prop.key] = relationship_from_property(prop)
        elif isinstance(prop, orm.ColumnProperty):
            if not include_primary_key and is_primary_key(sa_mapper, prop):
                continue
            fields[prop.key] = attribute_from_column_property(prop)
        elif isinstance(prop, orm.CompositeProperty):
            fields[prop.key] = Attribute()
    return fields
