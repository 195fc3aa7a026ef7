import abc
import typing


class JSONAPIFieldsException(Exception, metaclass=abc.ABCMeta):
    message: str

    def __str__(self):
        return self.message


class InvalidDeclarationError(JSONAPIFieldsException):
    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class UnknownResourceTypeError(JSONAPIFieldsException):
    name: str

    @property
    def message(self):
        return f'no resource known as "{self.name}"'

    def __init__(self, name: str):
        super().__init__(name)
        self.name = name


class ValueConversionError(JSONAPIFieldsException):
    field: typing.Optional["binding.BoundField"]
    value: typing.Any
    reason: str

    @property
    def message(self):
        if self.field is None:
            return f"failed to convert {self.value!r} ({self.reason})"
        else:
            return f'failed to convert {self.value!r} for field "{self.field.name}" ({self.reason})'

    def __init__(
        self,
        value: typing.Any,
        reason: str,
        field: typing.Optional["binding.BoundField"] = None,
    ):
        super().__init__(value, reason)
        self.value = value
        self.reason = reason
        self.field = field


if typing.TYPE_CHECKING:
    from . import binding  # noqa: E402
