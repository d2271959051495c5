import io
import typing
import urllib.parse

from ..interfaces import Request

MultiMap = typing.Mapping[str, typing.Sequence[str]]


class PlainRequest(Request):
    """
    An in-memory :py:class:`Request`.  Header names are kept as given.
    """

    _query: MultiMap
    _form: MultiMap
    _headers: MultiMap
    _body: typing.Optional[typing.BinaryIO]
    path_params: typing.Mapping[str, str]

    @property
    def content_type(self) -> str:
        for name, values in self._headers.items():
            if name.lower() == "content-type" and values:
                return values[0]
        return ""

    @property
    def query(self) -> MultiMap:
        return self._query

    @property
    def form(self) -> MultiMap:
        return self._form

    @property
    def headers(self) -> MultiMap:
        return self._headers

    @property
    def body(self) -> typing.Optional[typing.BinaryIO]:
        return self._body

    @classmethod
    def from_url(
        cls,
        url: str,
        headers: typing.Optional[typing.Mapping[str, str]] = None,
        body: typing.Optional[bytes] = None,
        path_params: typing.Optional[typing.Mapping[str, str]] = None,
    ) -> "PlainRequest":
        """
        Builds a request from a URL whose query string is parsed into
        :py:attr:`query`.  Each header is given a single value.
        """
        return cls(
            query=urllib.parse.parse_qs(urllib.parse.urlsplit(url).query, keep_blank_values=True),
            headers={k: [v] for k, v in (headers or {}).items()},
            body=io.BytesIO(body) if body is not None else None,
            path_params=path_params,
        )

    def __init__(
        self,
        query: typing.Optional[MultiMap] = None,
        form: typing.Optional[MultiMap] = None,
        headers: typing.Optional[MultiMap] = None,
        body: typing.Optional[typing.BinaryIO] = None,
        path_params: typing.Optional[typing.Mapping[str, str]] = None,
    ):
        self._query = query or {}
        self._form = form or {}
        self._headers = headers or {}
        self._body = body
        self.path_params = dict(path_params or {})


def plain_path_param_getter(request: Request, name: str) -> typing.Optional[str]:
    """
    Looks up :py:attr:`PlainRequest.path_params`; suitable for :py:attr:`BinderConfig.uri_param_getter`.
    """
    assert isinstance(request, PlainRequest)
    return request.path_params.get(name)
