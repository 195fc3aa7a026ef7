import abc
import re
import typing

from .binding import BoundField
from .exceptions import InvalidDeclarationError

# a word boundary sits before an uppercase letter that follows a lowercase letter,
# or before an uppercase letter that precedes a lowercase letter.
WORD_BOUNDARY_RE = re.compile(r"(?<=[a-z])([A-Z])|([A-Z])(?=[a-z])")


def separate_words(name: str, separator: str) -> str:
    """
    Turns a camelCased ``name`` into a lowercased string whose words are joined
    by ``separator``.

    >>> separate_words("createdAt", "_")
    'created_at'
    >>> separate_words("HTTPStatus", "-")
    'http-status'
    """
    separated = WORD_BOUNDARY_RE.sub(lambda m: separator + m.group(0), name)
    return separated.lower().strip(separator)


class KeyFormatter(metaclass=abc.ABCMeta):
    """
    A :py:class:`KeyFormatter` determines the key under which a field appears
    in the JSON representation.
    """

    @abc.abstractmethod
    def format(self, field: BoundField) -> str:
        ...  # pragma: nocover


def serialized_name_of(field: BoundField) -> str:
    if not isinstance(field, BoundField):
        raise TypeError(f"{field!r} is not a bound field; bind it with fields_from_mapping first")
    return field.serialized_name


class KeyFormatterFuncAdapter(KeyFormatter):
    func: typing.Callable[[BoundField], str]

    def format(self, field: BoundField) -> str:
        return self.func(field)

    def __init__(self, func: typing.Callable[[BoundField], str]):
        self.func = func  # type: ignore


class AsIsKeyFormatter(KeyFormatter):
    def format(self, field: BoundField) -> str:
        return serialized_name_of(field)


class SeparatingKeyFormatter(KeyFormatter):
    separator: typing.ClassVar[str]

    def format(self, field: BoundField) -> str:
        return separate_words(serialized_name_of(field), self.separator)


class DasherizedKeyFormatter(SeparatingKeyFormatter):
    separator = "-"


class UnderscoredKeyFormatter(SeparatingKeyFormatter):
    separator = "_"


KEY_FORMATTERS: typing.Mapping[str, typing.Type[KeyFormatter]] = {
    "as_is": AsIsKeyFormatter,
    "dasherized": DasherizedKeyFormatter,
    "underscored": UnderscoredKeyFormatter,
}


def key_formatter_by_name(name: str) -> KeyFormatter:
    try:
        return KEY_FORMATTERS[name]()
    except KeyError:
        raise InvalidDeclarationError(
            f"unknown key formatter: {name!r} (expected one of {', '.join(KEY_FORMATTERS)})"
        )


def as_key_formatter(
    value: typing.Union[str, KeyFormatter, typing.Callable[[BoundField], str]]
) -> KeyFormatter:
    """
    Turns a formatter name, a :py:class:`KeyFormatter` or a plain function into
    a :py:class:`KeyFormatter`.
    """
    if isinstance(value, KeyFormatter):
        return value
    elif isinstance(value, str):
        return key_formatter_by_name(value)
    elif callable(value):
        return KeyFormatterFuncAdapter(value)
    raise InvalidDeclarationError(f"{value!r} is not a key formatter")
