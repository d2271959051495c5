from ..exceptions import (
    BindingError,
    BodyDecodeError,
    BodyDecodeErrorItem,
    ConversionError,
    InvalidTargetError,
)
from ..models import Category


class TestJoinErrors:
    def test_nothing_failed(self):
        from ..exceptions import join_errors

        assert join_errors() is None
        assert join_errors(None, None) is None

    def test_flattening(self):
        from ..exceptions import join_errors

        e1 = ValueError("1")
        e2 = ValueError("2")
        e3 = ValueError("3")
        result = join_errors(None, e1, BindingError([e2, e3]), None)
        assert isinstance(result, BindingError)
        assert list(result.errors) == [e1, e2, e3]


def test_messages():
    assert str(InvalidTargetError("target must be a dataclass")) == (
        "invalid target: target must be a dataclass"
    )
    assert str(InvalidTargetError("unsupported", "a.b")) == 'invalid target: field "a.b": unsupported'

    e = ConversionError(Category.QUERY, "n", ["x"])
    e.__cause__ = ValueError("invalid literal")
    assert str(e) == 'conversion of query "n" failed (invalid literal)'

    assert (
        str(BodyDecodeError("application/json", "malformed payload"))
        == "failed to decode application/json body: malformed payload"
    )
    assert str(
        BodyDecodeError(
            "application/json",
            "invalid payload:",
            [BodyDecodeErrorItem("/a", "x"), BodyDecodeErrorItem("/b", "y")],
        )
    ) == "failed to decode application/json body: invalid payload: /a (x) and /b (y)"

    assert str(BindingError([ValueError("a"), ValueError("b"), ValueError("c")])) == (
        "input binder: a, b, and c"
    )
