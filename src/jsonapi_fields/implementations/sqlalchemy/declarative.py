"""
jsonapi_fields.implementations.sqlalchemy.declarative derives resource schemas
from SQLAlchemy-mapped classes.

Synopsis
--------

.. code-block:: python

   import sqlalchemy as sa
   from sqlalchemy import orm
   from jsonapi_fields import URLAttribute
   from jsonapi_fields.implementations.sqlalchemy import declarative_with_defaults

   Base = orm.declarative_base()
   decl = declarative_with_defaults(key_formatter="underscored")

   @decl
   class Foo(Base):
       __tablename__ = "foos"

       class Meta:
           fields = {"homePage": URLAttribute("https://example.com/")}
           exclude = ["secret"]

       id = sa.Column(sa.Integer(), primary_key=True, nullable=False)
       createdAt = sa.Column(sa.DateTime(timezone=True), nullable=False)
       homePage = sa.Column(sa.String(), nullable=True)
       secret = sa.Column(sa.String(), nullable=True)

   decl.configure()
   decl.schema_for(Foo).wire_keys()  # => created_at, home_page
"""

import typing
from collections import OrderedDict

from sqlalchemy import orm  # type: ignore

from ...declarative import Declarative, KeyFormatterLike, Meta
from ...fields import Field
from ...formatting import KeyFormatter, as_key_formatter
from ...schema import SchemaRegistry
from .core import fields_from_sqla_mapper


class SQLADeclarative(Declarative):
    """
    A :py:class:`Declarative` for SQLAlchemy-mapped classes.
    The fields are derived from the mapper; ``Meta.fields`` overrides or adds to them.
    """

    include_primary_key: bool

    def default_type_name(self, class_: typing.Type) -> str:
        sa_mapper = orm.class_mapper(class_)
        return sa_mapper.local_table.name

    def extract_fields(self, class_: typing.Type, meta: Meta) -> typing.Mapping[str, Field]:
        fields = OrderedDict(
            fields_from_sqla_mapper(class_, include_primary_key=self.include_primary_key)
        )
        fields.update(meta.fields)
        return fields

    def configure(self, skip_configure_mappers=False) -> None:
        if not skip_configure_mappers:
            orm.configure_mappers()
        super().configure()

    def __init__(
        self,
        registry: SchemaRegistry,
        key_formatter: KeyFormatter,
        include_primary_key: bool = False,
    ):
        super().__init__(registry=registry, key_formatter=key_formatter)
        self.include_primary_key = include_primary_key


def declarative_with_defaults(
    key_formatter: KeyFormatterLike = "as_is",
    registry: typing.Optional[SchemaRegistry] = None,
    include_primary_key: bool = False,
) -> SQLADeclarative:
    return SQLADeclarative(
        registry=(registry if registry is not None else SchemaRegistry()),
        key_formatter=as_key_formatter(key_formatter),
        include_primary_key=include_primary_key,
    )
