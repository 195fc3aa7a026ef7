from .binding import BoundField, fields_from_mapping  # noqa
from .deferred import Deferred  # noqa
from .exceptions import (  # noqa
    InvalidDeclarationError,
    JSONAPIFieldsException,
    UnknownResourceTypeError,
    ValueConversionError,
)
from .fields import (  # noqa
    Attribute,
    DateAttribute,
    Field,
    FieldKind,
    Relationship,
    RelationshipType,
    ToManyRelationship,
    ToOneRelationship,
    URLAttribute,
)
from .formatting import (  # noqa
    AsIsKeyFormatter,
    DasherizedKeyFormatter,
    KeyFormatter,
    KeyFormatterFuncAdapter,
    UnderscoredKeyFormatter,
    key_formatter_by_name,
)
from .schema import ResourceSchema, SchemaRegistry  # noqa
