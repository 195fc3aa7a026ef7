import typing

T = typing.TypeVar("T")


class Deferred(typing.Generic[T]):
    """
    A deferred object encapsulates a lazily evaluated value.

    Relationships use it to refer to resource types that are not defined yet
    at declaration time::

        ToOneRelationship(Deferred(lambda: Person))

    The yielder is called at most once; the yielded value is cached.

    :param Callable[..., T] yielder: a callable that resolves the value.
    :param args: positional arguments for the yielder.
    :param kwargs: keyword arguments for the yielder.
    """

    _yielder: typing.Callable[..., T]
    _value_yielded: bool = False
    _value: typing.Optional[T] = None
    _args: typing.Sequence[typing.Any]
    _kwargs: typing.Mapping[str, typing.Any]

    def __repr__(self) -> str:
        if self._value_yielded:
            return f"{type(self).__name__}(resolved={self._value!r})"
        else:
            return f"{type(self).__name__}({self._yielder!r})"

    def __init__(self, yielder: typing.Callable[..., T], *args, **kwargs) -> None:
        self._yielder = yielder
        self._args = args
        self._kwargs = kwargs

    def __call__(self) -> T:
        if not self._value_yielded:
            self._value = self._yielder(*self._args, **self._kwargs)
            self._value_yielded = True
        return typing.cast(T, self._value)


def resolve(value: typing.Union[T, Deferred[T]]) -> T:
    """
    Returns ``value`` itself, or the value it yields if it is a :py:class:`Deferred`.
    """
    if isinstance(value, Deferred):
        return value()
    else:
        return value
