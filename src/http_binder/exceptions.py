import abc
import typing

from .utils.formatting import english_enumerate


class HTTPBinderException(Exception, metaclass=abc.ABCMeta):
    @property
    @abc.abstractmethod
    def message(self) -> str:
        ...  # pragma: nocover

    def __str__(self):
        return self.message


class InvalidTargetError(HTTPBinderException):
    """
    Raised when a destination record cannot be bound to.  This always denotes a
    mistake in the declaration of the record rather than bad input.
    """

    _message: str
    field_name: typing.Optional[str]

    @property
    def message(self) -> str:
        if self.field_name is None:
            return f"invalid target: {self._message}"
        else:
            return f'invalid target: field "{self.field_name}": {self._message}'

    def __init__(self, message: str, field_name: typing.Optional[str] = None):
        self._message = message
        self.field_name = field_name


class ConversionError(HTTPBinderException):
    category: "models.Category"
    name: str
    values: typing.Sequence[str]

    @property
    def message(self) -> str:
        return f'conversion of {self.category.value} "{self.name}" failed ({self.__cause__!s})'

    def __init__(self, category: "models.Category", name: str, values: typing.Sequence[str]):
        self.category = category
        self.name = name
        self.values = values


class BodyDecodeErrorItem(typing.NamedTuple):
    pointer: str
    message: str


class BodyDecodeError(HTTPBinderException):
    content_type: str
    detail: str
    items: typing.Sequence[BodyDecodeErrorItem]

    @property
    def message(self) -> str:
        if not self.items:
            return f"failed to decode {self.content_type} body: {self.detail}"
        return f"failed to decode {self.content_type} body: {self.detail} " + english_enumerate(
            f"{item.pointer} ({item.message})" for item in self.items
        )

    def __init__(
        self,
        content_type: str,
        detail: str,
        items: typing.Sequence[BodyDecodeErrorItem] = (),
    ):
        self.content_type = content_type
        self.detail = detail
        self.items = items


class BindingError(HTTPBinderException):
    """
    Aggregates every runtime failure of a single bind call.
    """

    errors: typing.Sequence[Exception]

    @property
    def message(self) -> str:
        return "input binder: " + english_enumerate(str(e) for e in self.errors)

    def __init__(self, errors: typing.Sequence[Exception]):
        self.errors = errors


def join_errors(*errors: typing.Optional[Exception]) -> typing.Optional[BindingError]:
    """
    Merges the outcomes of independent binding branches.  ``None`` entries stand
    for success and are dropped; nested :py:class:`BindingError` instances are
    flattened so that the result exposes every underlying cause at one level.

    :return: ``None`` when nothing failed, otherwise a :py:class:`BindingError`.
    """
    flattened: typing.List[Exception] = []
    for e in errors:
        if e is None:
            continue
        if isinstance(e, BindingError):
            flattened.extend(e.errors)
        else:
            flattened.append(e)
    if not flattened:
        return None
    return BindingError(flattened)


if typing.TYPE_CHECKING:
    from . import models  # noqa: E402
