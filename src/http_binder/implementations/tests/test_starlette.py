import asyncio
import dataclasses
import typing

import pytest
from starlette.requests import Request

from ...binder import Binder, BinderConfig
from ...exceptions import BindingError
from ..plain import plain_path_param_getter


@dataclasses.dataclass
class Order:
    id: str = dataclasses.field(default="", metadata={"uri": "id"})
    fields: typing.List[str] = dataclasses.field(
        default_factory=list, metadata={"query": "fields"}
    )
    request_id: str = dataclasses.field(default="", metadata={"header": "X-Request-Id"})
    note: str = dataclasses.field(default="", metadata={"form": "note"})
    amount: int = dataclasses.field(default=0, metadata={"json": "amount"})


def make_request(
    method: str = "GET",
    query_string: bytes = b"",
    headers: typing.Sequence[typing.Tuple[str, str]] = (),
    body: bytes = b"",
    path_params: typing.Optional[typing.Dict[str, typing.Any]] = None,
) -> Request:
    scope = {
        "type": "http",
        "method": method,
        "path": "/",
        "query_string": query_string,
        "headers": [(k.lower().encode("latin-1"), v.encode("latin-1")) for k, v in headers],
        "path_params": path_params or {},
    }

    async def receive():
        return {"type": "http.request", "body": body, "more_body": False}

    return Request(scope, receive)


@pytest.fixture
def binder():
    return Binder(BinderConfig(uri_param_getter=plain_path_param_getter))


def test_from_starlette_request():
    from ..starlette import from_starlette_request

    req = asyncio.run(
        from_starlette_request(
            make_request(
                "POST",
                query_string=b"fields=a&fields=b",
                headers=[("Content-Type", "application/json"), ("X-Tag", "1"), ("X-Tag", "2")],
                body=b'{"amount": 5}',
                path_params={"id": 42},
            )
        )
    )
    assert req.query == {"fields": ["a", "b"]}
    assert req.headers["x-tag"] == ["1", "2"]
    assert req.content_type == "application/json"
    assert req.body.read() == b'{"amount": 5}'
    assert req.path_params == {"id": "42"}


def test_bind_json(binder):
    from ..starlette import bind_starlette_request

    r = Order()
    asyncio.run(
        bind_starlette_request(
            binder,
            make_request(
                "PUT",
                query_string=b"fields=a&fields=b",
                headers=[("Content-Type", "application/json"), ("X-Request-Id", "abc")],
                body=b'{"amount": 5}',
                path_params={"id": "7"},
            ),
            r,
        )
    )
    assert r == Order(id="7", fields=["a", "b"], request_id="abc", amount=5)


def test_bind_form(binder):
    from ..starlette import bind_starlette_request

    r = Order()
    asyncio.run(
        bind_starlette_request(
            binder,
            make_request(
                "POST",
                headers=[("Content-Type", "application/x-www-form-urlencoded")],
                body=b"note=hello+world",
            ),
            r,
        )
    )
    assert r.note == "hello world"


def test_bind_failure(binder):
    from ..starlette import bind_starlette_request

    with pytest.raises(BindingError):
        asyncio.run(
            bind_starlette_request(
                binder,
                make_request(
                    "POST",
                    headers=[("Content-Type", "application/json")],
                    body=b'{"amount": "five"}',
                ),
                Order(),
            )
        )
