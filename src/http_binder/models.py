import dataclasses
import enum
import typing

from .interfaces import Setter


class Category(enum.Enum):
    """
    Where a group of request values originates.  The value of each member is the
    metadata key that marks a record field as bound from that source.
    """

    QUERY = "query"
    FORM = "form"
    HEADER = "header"
    URI = "uri"


ALL_CATEGORIES: typing.Sequence[Category] = (
    Category.QUERY,
    Category.FORM,
    Category.HEADER,
    Category.URI,
)


@dataclasses.dataclass(frozen=True)
class FieldDescriptor:
    category: Category
    """
    The source category the field reads from.
    """

    name: str
    """
    The declared name of the source value; not required to be unique.
    """

    setter: Setter
    """
    The setter that writes into the field.
    """

    path: str
    """
    Dotted attribute path of the field from the root record, e.g. ``paging.limit``.
    """
