"""
This module contains the interface definitions shared by the binding engine and
the request adapters found under :py:mod:`http_binder.implementations`.

"""
import abc
import typing


@typing.runtime_checkable
class StringsUnmarshaler(typing.Protocol):
    """
    The custom conversion capability.  Any class that implements
    :py:meth:`unmarshal_strings` can be used as the type of a bound field,
    whatever its underlying representation is.
    """

    def unmarshal_strings(self, values: typing.Sequence[str]) -> None:
        """
        Updates the instance in place from the given values.

        :param Sequence[str] values: the values supplied for the field, in order of appearance.
        :raises Exception: whenever the values cannot be converted.
        """
        ...  # pragma: nocover


class Setter(metaclass=abc.ABCMeta):
    """
    A :py:class:`Setter` writes an ordered sequence of strings into exactly one
    field of a destination record.
    """

    @abc.abstractmethod
    def set(self, values: typing.Sequence[str]) -> None:
        """
        Writes the values into the field.

        :param Sequence[str] values: a non-empty sequence of values.
        """
        ...  # pragma: nocover


class Request(metaclass=abc.ABCMeta):
    """
    A :py:class:`Request` exposes the parts of an inbound HTTP request that take
    part in binding.
    """

    @property
    @abc.abstractmethod
    def content_type(self) -> str:
        """
        Returns the value of the ``Content-Type`` header, or an empty string if absent.
        """
        ...  # pragma: nocover

    @property
    @abc.abstractmethod
    def query(self) -> typing.Mapping[str, typing.Sequence[str]]:
        """
        Returns the query parameters.
        """
        ...  # pragma: nocover

    @property
    @abc.abstractmethod
    def form(self) -> typing.Mapping[str, typing.Sequence[str]]:
        """
        Returns form values that were already parsed by the transport.
        The binder adds the values of a url-encoded body to these.
        """
        ...  # pragma: nocover

    @property
    @abc.abstractmethod
    def headers(self) -> typing.Mapping[str, typing.Sequence[str]]:
        """
        Returns the header values.  Names may use any casing.
        """
        ...  # pragma: nocover

    @property
    @abc.abstractmethod
    def body(self) -> typing.Optional[typing.BinaryIO]:
        """
        Returns the body stream, or None if the request carries no body.
        The stream is consumed and closed by the binder.
        """
        ...  # pragma: nocover


class BodyDecoder(metaclass=abc.ABCMeta):
    """
    A :py:class:`BodyDecoder` decodes a whole request body directly into a
    destination record.
    """

    @abc.abstractmethod
    def __call__(self, body: typing.BinaryIO, target: typing.Any) -> None:
        """
        Decodes the body into the target record.

        :param BinaryIO body: the body stream.
        :param Any target: the destination record.
        :raises BodyDecodeError: if the payload is malformed.
        """
        ...  # pragma: nocover


class UriParamGetter(typing.Protocol):
    def __call__(self, request: Request, name: str) -> typing.Optional[str]:
        ...  # pragma: nocover
