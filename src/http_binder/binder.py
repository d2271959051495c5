import dataclasses
import logging
import typing

from .accessor import Accessor
from .content_type import ContentType, get_content_type
from .decoders import JSONBodyDecoder, XMLBodyDecoder, parse_form_body
from .exceptions import BodyDecodeError, ConversionError, join_errors
from .interfaces import BodyDecoder, Request, UriParamGetter
from .models import Category
from .utils import canonical_header_key

logger = logging.getLogger(__name__)

MultiMap = typing.Mapping[str, typing.Sequence[str]]


def default_body_decoders() -> typing.Dict[ContentType, BodyDecoder]:
    return {
        ContentType.JSON: JSONBodyDecoder(),
        ContentType.XML: XMLBodyDecoder(),
    }


@dataclasses.dataclass
class BinderConfig:
    uri_param_getter: typing.Optional[UriParamGetter] = None
    """
    Looks up a path parameter by name, typically backed by the router.
    Path parameters are not bound when this is not given.
    """

    body_decoders: typing.Mapping[ContentType, BodyDecoder] = dataclasses.field(
        default_factory=default_body_decoders
    )
    """
    Full-body decoders by content type.  A url-encoded form body is always
    parsed into form values, regardless of this mapping.
    """


def _drain_and_close(body: typing.BinaryIO) -> None:
    try:
        if not body.closed:
            body.read()
    except Exception:
        # must not mask the outcome of the bind
        logger.debug("failed to drain the request body", exc_info=True)
    finally:
        body.close()


class Binder:
    """
    A :py:class:`Binder` binds an inbound request into a destination record.

    The body is decoded first according to the content type, then query, form,
    header and path parameter values are written into the fields annotated
    with the corresponding :py:class:`Category`.  Every failure is collected
    and raised at once as a :py:class:`BindingError`.

    :param BinderConfig config: the configuration.
    """

    config: BinderConfig

    def _decode_body(
        self, body: typing.BinaryIO, content_type: ContentType, target: typing.Any
    ) -> typing.Tuple[MultiMap, typing.Optional[BodyDecodeError]]:
        try:
            if content_type == ContentType.FORM:
                return (parse_form_body(body), None)
            decoder = self.config.body_decoders.get(content_type)
            if decoder is not None:
                decoder(body, target)
        except BodyDecodeError as e:
            return ({}, e)
        return ({}, None)

    def _bind_values(
        self,
        acc: Accessor,
        category: Category,
        values: typing.Iterable[typing.Tuple[str, typing.Sequence[str]]],
    ) -> typing.Optional[Exception]:
        errors: typing.List[typing.Optional[Exception]] = []
        for name, arr in values:
            try:
                acc.set(category, name, *arr)
            except ConversionError as e:
                errors.append(e)
        return join_errors(*errors)

    def _bind_headers(self, acc: Accessor, headers: MultiMap) -> typing.Optional[Exception]:
        return self._bind_values(
            acc,
            Category.HEADER,
            ((canonical_header_key(name), arr) for name, arr in headers.items()),
        )

    def _bind_uri_params(self, acc: Accessor, request: Request) -> typing.Optional[Exception]:
        getter = self.config.uri_param_getter
        if getter is None:
            return None
        values = []
        for name in acc.get_fields(Category.URI):
            value = getter(request, name)
            if value is not None:
                values.append((name, (value,)))
        return self._bind_values(acc, Category.URI, values)

    def bind(self, request: Request, target: typing.Any) -> None:
        """
        Binds the request into the target record, mutating it in place.  The
        body of the request is consumed and closed in any case.

        :param Request request: the inbound request.
        :param Any target: a mutable dataclass instance.
        :raises InvalidTargetError: if the target cannot be bound to.  Nothing is bound in that case.
        :raises BindingError: if any value or the body could not be decoded.
        """
        body = request.body
        try:
            acc = Accessor(target)
            body_form: MultiMap = {}
            body_error: typing.Optional[BodyDecodeError] = None
            if body is not None:
                body_form, body_error = self._decode_body(
                    body, get_content_type(request.content_type), target
                )
            form = dict(request.form)
            for name, arr in body_form.items():
                form[name] = list(form.get(name, ())) + list(arr)

            error = join_errors(
                body_error,
                self._bind_values(acc, Category.QUERY, request.query.items()),
                self._bind_values(acc, Category.FORM, form.items()),
                self._bind_headers(acc, request.headers),
                self._bind_uri_params(acc, request),
            )
        finally:
            if body is not None:
                _drain_and_close(body)

        if error is not None:
            logger.debug("binding %s failed: %s", type(target).__name__, error)
            raise error
        logger.debug("bound %s", type(target).__name__)

    def __init__(self, config: typing.Optional[BinderConfig] = None):
        self.config = config if config is not None else BinderConfig()
