"""
jsonapi_fields.declarative lets resource types be declared on the classes they describe.

Synopsis
--------

.. code-block:: python

   from jsonapi_fields import Attribute, DateAttribute, Deferred, ToOneRelationship
   from jsonapi_fields.declarative import declarative

   decl = declarative(key_formatter="dasherized")

   @decl
   class Article:
       class Meta:
           type_name = "articles"
           fields = {
               "title": Attribute(),
               "createdAt": DateAttribute().read_only(),
               "author": ToOneRelationship(Deferred(lambda: Person)),
           }

   @decl
   class Person:
       class Meta:
           fields = {"firstName": Attribute()}

   schema = decl.schema_for(Article)
   schema.wire_key("createdAt")  # => "created-at"
"""

import collections.abc
import dataclasses
import typing
from collections import OrderedDict

from .binding import BoundField
from .exceptions import InvalidDeclarationError
from .fields import Field
from .formatting import KeyFormatter, as_key_formatter
from .schema import ResourceSchema, SchemaRegistry

KeyFormatterLike = typing.Union[str, KeyFormatter, typing.Callable[[BoundField], str]]


@dataclasses.dataclass
class Meta:
    type_name: typing.Optional[str] = None
    fields: typing.Mapping[str, Field] = dataclasses.field(default_factory=dict)
    exclude: typing.Sequence[str] = ()
    key_formatter: typing.Optional[KeyFormatterLike] = None


def handle_meta(meta: typing.Type) -> Meta:
    attrs = {k: v for k, v in vars(meta).items() if not k.startswith("__")}
    fields = attrs.get("fields", {})
    if not isinstance(fields, collections.abc.Mapping):
        raise InvalidDeclarationError(
            f"Meta.fields of {meta.__qualname__} must be a mapping, got {type(fields).__name__}"
        )
    exclude = attrs.get("exclude", ())
    if isinstance(exclude, str):
        exclude = (exclude,)
    return Meta(
        type_name=attrs.get("type_name"),
        fields=fields,
        exclude=tuple(exclude),
        key_formatter=attrs.get("key_formatter"),
    )


class Declarative:
    """
    The facade that turns decorated classes into :py:class:`ResourceSchema`s.

    Decorated classes are collected and built into schemas by :py:meth:`configure`,
    which is called on demand by :py:meth:`schema_for`.
    """

    registry: SchemaRegistry
    key_formatter: KeyFormatter
    _pending_classes: typing.List[typing.Type]

    def default_type_name(self, class_: typing.Type) -> str:
        return class_.__name__.lower()

    def extract_fields(self, class_: typing.Type, meta: Meta) -> typing.Mapping[str, Field]:
        return meta.fields

    def build_schema(self, class_: typing.Type) -> ResourceSchema:
        meta_class = getattr(class_, "Meta", None)
        meta = handle_meta(meta_class) if meta_class is not None else Meta()
        fields = OrderedDict(
            (name, field)
            for name, field in self.extract_fields(class_, meta).items()
            if name not in meta.exclude
        )
        return ResourceSchema(
            type_name=meta.type_name or self.default_type_name(class_),
            fields=fields,
            key_formatter=(
                as_key_formatter(meta.key_formatter)
                if meta.key_formatter is not None
                else self.key_formatter
            ),
        )

    def configure(self) -> None:
        """
        Builds and registers the schemas of the pending classes.

        A class whose schema cannot be built stays pending; the others are still
        registered.  The first error is raised once every class has been tried.
        """
        error: typing.Optional[InvalidDeclarationError] = None
        for class_ in list(self._pending_classes):
            try:
                self.registry.register(self.build_schema(class_), native_class=class_)
            except InvalidDeclarationError as e:
                if error is None:
                    error = e
                continue
            self._pending_classes.remove(class_)
        if error is not None:
            raise error

    def schema_for(self, class_: typing.Type) -> ResourceSchema:
        if class_ in self._pending_classes:
            self.configure()
        return self.registry.query_schema_by_native_class(class_)

    T = typing.TypeVar("T")

    def __call__(self, class_: typing.Type[T]) -> typing.Type[T]:
        self._pending_classes.append(class_)
        return class_

    def __init__(self, registry: SchemaRegistry, key_formatter: KeyFormatter):
        self.registry = registry
        self.key_formatter = key_formatter
        self._pending_classes = []


def declarative(
    key_formatter: KeyFormatterLike = "as_is",
    registry: typing.Optional[SchemaRegistry] = None,
) -> Declarative:
    return Declarative(
        registry=(registry if registry is not None else SchemaRegistry()),
        key_formatter=as_key_formatter(key_formatter),
    )
