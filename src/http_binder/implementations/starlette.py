"""
Adapter for `Starlette <https://www.starlette.io/>`_ requests, which FastAPI
builds upon.  Starlette reads bodies asynchronously, so the body is read
beforehand and binding itself stays synchronous.  Path parameters are copied
to :py:attr:`PlainRequest.path_params`, so :py:func:`plain_path_param_getter`
serves as the path parameter getter::

    binder = Binder(BinderConfig(uri_param_getter=plain_path_param_getter))

    async def get_order(request: starlette.requests.Request):
        params = GetOrderParams()
        await bind_starlette_request(binder, request, params)

"""
import io
import typing

from starlette.requests import Request as StarletteRequest

from ..binder import Binder
from .plain import PlainRequest


def _group(
    items: typing.Iterable[typing.Tuple[str, str]]
) -> typing.Dict[str, typing.List[str]]:
    retval: typing.Dict[str, typing.List[str]] = {}
    for k, v in items:
        retval.setdefault(k, []).append(v)
    return retval


async def from_starlette_request(request: StarletteRequest) -> PlainRequest:
    body = await request.body()
    return PlainRequest(
        query=_group(request.query_params.multi_items()),
        headers=_group(request.headers.items()),
        body=io.BytesIO(body) if body else None,
        path_params={k: str(v) for k, v in request.path_params.items()},
    )


async def bind_starlette_request(
    binder: Binder, request: StarletteRequest, target: typing.Any
) -> None:
    binder.bind(await from_starlette_request(request), target)
