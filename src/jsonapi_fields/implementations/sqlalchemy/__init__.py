from .core import fields_from_sqla_mapper  # noqa
from .declarative import SQLADeclarative, declarative_with_defaults  # noqa
