import copy
import dataclasses
import logging
import typing

from .exceptions import ConversionError, InvalidTargetError
from .interfaces import Setter, StringsUnmarshaler
from .models import ALL_CATEGORIES, Category, FieldDescriptor
from .utils import is_record_type, sequence_item_type, unwrap_optional

logger = logging.getLogger(__name__)


class FieldSetter(Setter):
    """
    Base class of the setters that write into an attribute of a record instance.
    """

    target: typing.Any
    attr: str

    def __repr__(self) -> str:
        return f"{type(self).__name__}({type(self.target).__name__}.{self.attr})"

    def __init__(self, target: typing.Any, attr: str):
        self.target = target
        self.attr = attr


class ScalarFieldSetter(FieldSetter):
    def set(self, values: typing.Sequence[str]) -> None:
        if values:
            setattr(self.target, self.attr, values[0])


class ListFieldSetter(FieldSetter):
    def set(self, values: typing.Sequence[str]) -> None:
        if values:
            setattr(self.target, self.attr, list(values))


class CustomFieldSetter(FieldSetter):
    """
    Delegates to :py:meth:`StringsUnmarshaler.unmarshal_strings` of a shallow copy
    of the value held by the field, or of a fresh instance of ``class_`` for an
    empty slot.  The result is stored only once the conversion succeeded, so a
    default instance shared between records is never modified.
    """

    class_: typing.Type[StringsUnmarshaler]

    def set(self, values: typing.Sequence[str]) -> None:
        value = getattr(self.target, self.attr)
        if isinstance(value, StringsUnmarshaler):
            value = copy.copy(value)
        else:
            value = self.class_()
        value.unmarshal_strings(values)
        setattr(self.target, self.attr, value)

    def __init__(self, target: typing.Any, attr: str, class_: typing.Type[StringsUnmarshaler]):
        super().__init__(target, attr)
        self.class_ = class_


def implements_unmarshaler(hint: typing.Any) -> bool:
    return isinstance(hint, type) and issubclass(hint, StringsUnmarshaler)


def resolve_setter(target: typing.Any, attr: str, hint: typing.Any, path: str) -> FieldSetter:
    """
    Returns a setter for the attribute ``attr`` of ``target`` according to its type hint.
    The custom conversion capability takes precedence over the built-in setters.

    :raises InvalidTargetError: if the type is not supported.
    """
    inner, _ = unwrap_optional(hint)
    if implements_unmarshaler(inner):
        return CustomFieldSetter(target, attr, inner)
    if inner is str:
        return ScalarFieldSetter(target, attr)
    if sequence_item_type(inner) is str:
        return ListFieldSetter(target, attr)
    raise InvalidTargetError(
        f"field must be str, a list of str or a type implementing unmarshal_strings, got {hint!r}",
        path,
    )


def _is_frozen(record: typing.Any) -> bool:
    params = getattr(type(record), "__dataclass_params__", None)
    return params is not None and params.frozen


class Accessor:
    """
    An :py:class:`Accessor` indexes the annotated fields of a destination record by
    (category, name) so that request values can be written into them.

    Fields are annotated through their metadata, the key being the value of a
    :py:class:`Category` member::

        @dataclasses.dataclass
        class ListOrders:
            status: typing.List[str] = dataclasses.field(default_factory=list, metadata={"query": "status"})
            user_id: str = dataclasses.field(default="", metadata={"uri": "id"})

    Fields whose name starts with an underscore are never inspected, so records
    held by such fields are not traversed either.

    :param Any target: a mutable dataclass instance.
    :param categories: the categories to index.  Every category is indexed if none is given.
    :raises InvalidTargetError: if the target or one of its annotated fields cannot be bound.
    """

    _index: typing.Dict[Category, typing.Dict[str, typing.List[Setter]]]
    _descriptors: typing.List[FieldDescriptor]

    @property
    def descriptors(self) -> typing.Sequence[FieldDescriptor]:
        return self._descriptors

    def _travel(self, record: typing.Any, prefix: str) -> None:
        try:
            hints = typing.get_type_hints(type(record))
        except NameError as e:
            raise InvalidTargetError(f"unresolvable type hint ({e})", prefix.rstrip(".") or None)

        for field in dataclasses.fields(record):
            # private attributes are never bound
            if field.name.startswith("_"):
                continue

            path = prefix + field.name
            hint = hints.get(field.name, field.type)

            if is_record_type(hint) and not implements_unmarshaler(hint):
                nested = getattr(record, field.name)
                if not isinstance(nested, hint):
                    raise InvalidTargetError("nested record is not initialized", path)
                self._travel(nested, path + ".")
                continue

            setter: typing.Optional[FieldSetter] = None
            for category, names in self._index.items():
                name = field.metadata.get(category.value)
                if name is None:
                    continue
                if setter is None:
                    if _is_frozen(record):
                        raise InvalidTargetError("record holding the field is frozen", path)
                    setter = resolve_setter(record, field.name, hint, path)
                names.setdefault(name, []).append(setter)
                self._descriptors.append(FieldDescriptor(category, name, setter, path))

    def get_fields(self, category: Category) -> typing.List[str]:
        """
        Returns every distinct name registered for the category, in no particular order.
        """
        return list(self._index.get(category, ()))

    def set(self, category: Category, name: str, *values: str) -> None:
        """
        Applies values to every field registered under (category, name), in
        registration order.  Nothing happens if no value is given or no field
        is registered under the key.

        :raises ConversionError: on the first setter that fails; its cause is the underlying error.
        """
        if not values:
            return
        setters = self._index.get(category, {}).get(name)
        if not setters:
            return
        for setter in setters:
            try:
                setter.set(values)
            except Exception as e:
                raise ConversionError(category, name, values) from e

    def __init__(self, target: typing.Any, *categories: Category):
        if target is None or isinstance(target, type) or not dataclasses.is_dataclass(target):
            raise InvalidTargetError(
                f"target must be a dataclass instance, got {type(target).__name__}"
            )
        if _is_frozen(target):
            raise InvalidTargetError(f"target {type(target).__name__} must not be frozen")

        self._index = {Category(c): {} for c in (categories or ALL_CATEGORIES)}
        self._descriptors = []
        self._travel(target, "")
        logger.debug(
            "indexed %d field(s) of %s for %s",
            len(self._descriptors),
            type(target).__name__,
            ", ".join(c.value for c in self._index),
        )
