import collections.abc
import dataclasses
import types
import typing

_UNION_ORIGINS = (typing.Union, getattr(types, "UnionType", typing.Union))

_SEQUENCE_ORIGINS = (
    list,
    collections.abc.Sequence,
    collections.abc.MutableSequence,
)


def unwrap_optional(hint: typing.Any) -> typing.Tuple[typing.Any, bool]:
    """
    Strips ``Optional`` off a type hint.

    :return: a tuple of the inner type and a boolean telling if the hint was optional.
    """
    if typing.get_origin(hint) in _UNION_ORIGINS:
        args = [a for a in typing.get_args(hint) if a is not type(None)]
        if len(args) == 1 and len(args) != len(typing.get_args(hint)):
            return args[0], True
    return hint, False


def sequence_item_type(hint: typing.Any) -> typing.Optional[typing.Any]:
    """
    Returns the item type of a list-like hint such as ``List[str]`` or
    ``Sequence[int]``, or None if the hint is not list-like.
    """
    if typing.get_origin(hint) in _SEQUENCE_ORIGINS:
        args = typing.get_args(hint)
        return args[0] if args else typing.Any
    return None


def is_record_type(hint: typing.Any) -> bool:
    return isinstance(hint, type) and dataclasses.is_dataclass(hint)
