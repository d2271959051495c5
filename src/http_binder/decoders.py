import abc
import collections.abc
import dataclasses
import json
import typing
import urllib.parse
from xml.etree import ElementTree

from .exceptions import BodyDecodeError, BodyDecodeErrorItem
from .interfaces import BodyDecoder
from .utils import escape_pointer_token, is_record_type, sequence_item_type, unwrap_optional

FORM_CONTENT_TYPE = "application/x-www-form-urlencoded"

_MAPPING_ORIGINS = (dict, collections.abc.Mapping, collections.abc.MutableMapping)

_TRUE_STRINGS = frozenset(["1", "t", "true"])
_FALSE_STRINGS = frozenset(["0", "f", "false"])


def parse_form_body(body: typing.BinaryIO) -> typing.Dict[str, typing.List[str]]:
    """
    Parses an ``application/x-www-form-urlencoded`` body.  Blank values are kept.

    :raises BodyDecodeError: if the body is not valid UTF-8.
    """
    data = body.read()
    try:
        return urllib.parse.parse_qs(
            data.decode("utf-8"), keep_blank_values=True, errors="strict"
        )
    except ValueError as e:
        raise BodyDecodeError(FORM_CONTENT_TYPE, f"malformed payload ({e})")


def _child(pointer: str, token: str) -> str:
    return f"{pointer.rstrip('/')}/{escape_pointer_token(token)}"


def _type_repr(hint: typing.Any) -> str:
    if isinstance(hint, type):
        return hint.__name__
    return repr(hint).replace("typing.", "")


def _bound_fields(
    class_: typing.Type,
) -> typing.Iterator[typing.Tuple[dataclasses.Field, typing.Any]]:
    hints = typing.get_type_hints(class_)
    for field in dataclasses.fields(class_):
        if field.name.startswith("_"):
            continue
        yield field, hints.get(field.name, field.type)


class DecodingContext:
    errors: typing.List[BodyDecodeErrorItem]

    def error_occurred(self, pointer: str, message: str) -> None:
        self.errors.append(BodyDecodeErrorItem(pointer, message))

    def __init__(self):
        self.errors = []


class TypedBodyDecoder(BodyDecoder, metaclass=abc.ABCMeta):
    """
    Base class of the decoders that write a parsed document into a record
    according to the type hints of its fields.  Every type mismatch is recorded
    with the location in the document, and reported at once.
    """

    content_type: typing.ClassVar[str]

    @abc.abstractmethod
    def _parse(self, body: typing.BinaryIO) -> typing.Tuple[str, typing.Any]:
        """
        Parses the body and returns the pointer to its root and the root itself.
        """
        ...  # pragma: nocover

    @abc.abstractmethod
    def _decode_fields(
        self,
        ctx: DecodingContext,
        pointer: str,
        class_: typing.Type,
        source: typing.Any,
        current: typing.Any,
    ) -> typing.Dict[str, typing.Any]:
        """
        Returns converted values keyed by attribute name, for the fields the source provides.
        """
        ...  # pragma: nocover

    def _record(
        self,
        ctx: DecodingContext,
        pointer: str,
        class_: typing.Type,
        source: typing.Any,
        current: typing.Any,
    ) -> typing.Tuple[bool, typing.Any]:
        values = self._decode_fields(ctx, pointer, class_, source, current)
        if isinstance(current, class_):
            for k, v in values.items():
                setattr(current, k, v)
            return (True, current)

        init_names = {f.name for f in dataclasses.fields(class_) if f.init}
        try:
            instance = class_(**{k: v for k, v in values.items() if k in init_names})
        except TypeError as e:
            ctx.error_occurred(pointer, f"cannot construct {class_.__name__} ({e})")
            return (False, None)
        for k, v in values.items():
            if k not in init_names:
                setattr(instance, k, v)
        return (True, instance)

    def __call__(self, body: typing.BinaryIO, target: typing.Any) -> None:
        pointer, document = self._parse(body)
        ctx = DecodingContext()
        self._record(ctx, pointer, type(target), document, target)
        if ctx.errors:
            raise BodyDecodeError(self.content_type, "invalid payload:", ctx.errors)


class JSONBodyDecoder(TypedBodyDecoder):
    """
    Decodes a JSON object into a record.  The key of a field is taken from the
    ``json`` entry of its metadata (``"-"`` excludes the field), defaulting to the
    attribute name; keys are matched case-insensitively when there is no exact match.
    Keys without a corresponding field are ignored.
    """

    content_type = "application/json"

    def _parse(self, body: typing.BinaryIO) -> typing.Tuple[str, typing.Any]:
        try:
            document = json.load(body)
        except (ValueError, RecursionError) as e:
            raise BodyDecodeError(self.content_type, f"malformed payload ({e})")
        if not isinstance(document, dict):
            raise BodyDecodeError(
                self.content_type,
                f"document must be an object, got {type(document).__name__}",
            )
        return ("/", document)

    def _decode_fields(
        self,
        ctx: DecodingContext,
        pointer: str,
        class_: typing.Type,
        source: typing.Any,
        current: typing.Any,
    ) -> typing.Dict[str, typing.Any]:
        folded = {k.casefold(): k for k in source}
        values: typing.Dict[str, typing.Any] = {}
        for field, hint in _bound_fields(class_):
            name = field.metadata.get("json", field.name)
            if name == "-":
                continue
            key = name if name in source else folded.get(name.casefold())
            if key is None:
                continue
            ok, value = self._convert(
                ctx,
                _child(pointer, key),
                hint,
                source[key],
                getattr(current, field.name, None),
            )
            if ok:
                values[field.name] = value
        return values

    def _convert(
        self,
        ctx: DecodingContext,
        pointer: str,
        hint: typing.Any,
        value: typing.Any,
        current: typing.Any = None,
    ) -> typing.Tuple[bool, typing.Any]:
        if hint is typing.Any:
            return (True, value)

        inner, optional = unwrap_optional(hint)
        if value is None:
            if optional:
                return (True, None)
            ctx.error_occurred(pointer, f"null where {_type_repr(hint)} expected")
            return (False, None)

        if is_record_type(inner):
            if not isinstance(value, dict):
                ctx.error_occurred(
                    pointer, f"{type(value).__name__} where {_type_repr(inner)} expected"
                )
                return (False, None)
            return self._record(ctx, pointer, inner, value, current)

        item_type = sequence_item_type(inner)
        if item_type is not None:
            if not isinstance(value, list):
                ctx.error_occurred(pointer, f"{type(value).__name__} where array expected")
                return (False, None)
            items = []
            all_ok = True
            for i, v in enumerate(value):
                ok, x = self._convert(ctx, _child(pointer, str(i)), item_type, v)
                all_ok = all_ok and ok
                items.append(x)
            return (all_ok, items)

        if typing.get_origin(inner) in _MAPPING_ORIGINS:
            if not isinstance(value, dict):
                ctx.error_occurred(pointer, f"{type(value).__name__} where object expected")
                return (False, None)
            args = typing.get_args(inner)
            value_type = args[1] if len(args) == 2 else typing.Any
            mapping = {}
            all_ok = True
            for k, v in value.items():
                ok, x = self._convert(ctx, _child(pointer, k), value_type, v)
                all_ok = all_ok and ok
                mapping[k] = x
            return (all_ok, mapping)

        if inner is float and isinstance(value, (int, float)) and not isinstance(value, bool):
            return (True, float(value))
        if inner is int and isinstance(value, bool):
            ctx.error_occurred(pointer, "bool where int expected")
            return (False, None)
        if isinstance(inner, type) and isinstance(value, inner):
            return (True, value)

        ctx.error_occurred(pointer, f"{type(value).__name__} where {_type_repr(inner)} expected")
        return (False, None)


class XMLBodyDecoder(TypedBodyDecoder):
    """
    Decodes an XML document into a record.  Fields are read from the child
    elements of the root element whose tag is given by the ``xml`` entry of
    the field's metadata, defaulting to the attribute name.  A ``,attr`` suffix
    (``"id,attr"``) reads an attribute of the element instead; ``"-"``
    excludes the field.
    """

    content_type = "application/xml"

    def _parse(self, body: typing.BinaryIO) -> typing.Tuple[str, typing.Any]:
        try:
            root = ElementTree.parse(body).getroot()
        except ElementTree.ParseError as e:
            raise BodyDecodeError(self.content_type, f"malformed payload ({e})")
        return (_child("/", root.tag), root)

    def _decode_fields(
        self,
        ctx: DecodingContext,
        pointer: str,
        class_: typing.Type,
        source: typing.Any,
        current: typing.Any,
    ) -> typing.Dict[str, typing.Any]:
        values: typing.Dict[str, typing.Any] = {}
        for field, hint in _bound_fields(class_):
            declared = field.metadata.get("xml", field.name)
            if declared == "-":
                continue
            name, _, flag = declared.partition(",")
            name = name or field.name
            if flag == "attr":
                if name not in source.attrib:
                    continue
                ok, value = self._convert_text(
                    ctx, _child(pointer, "@" + name), unwrap_optional(hint)[0], source.attrib[name]
                )
            else:
                children = [e for e in source if e.tag == name]
                if not children:
                    continue
                ok, value = self._convert_elements(
                    ctx, _child(pointer, name), hint, children, getattr(current, field.name, None)
                )
            if ok:
                values[field.name] = value
        return values

    def _convert_elements(
        self,
        ctx: DecodingContext,
        pointer: str,
        hint: typing.Any,
        elements: typing.Sequence[ElementTree.Element],
        current: typing.Any,
    ) -> typing.Tuple[bool, typing.Any]:
        inner, _ = unwrap_optional(hint)
        item_type = sequence_item_type(inner)
        if item_type is None:
            # a repeated element overrides the former ones
            return self._convert_element(ctx, pointer, inner, elements[-1], current)
        items = []
        all_ok = True
        for i, element in enumerate(elements):
            ok, x = self._convert_element(ctx, f"{pointer}[{i}]", item_type, element, None)
            all_ok = all_ok and ok
            items.append(x)
        return (all_ok, items)

    def _convert_element(
        self,
        ctx: DecodingContext,
        pointer: str,
        hint: typing.Any,
        element: ElementTree.Element,
        current: typing.Any,
    ) -> typing.Tuple[bool, typing.Any]:
        inner, _ = unwrap_optional(hint)
        if is_record_type(inner):
            return self._record(ctx, pointer, inner, element, current)
        return self._convert_text(ctx, pointer, inner, element.text or "")

    def _convert_text(
        self, ctx: DecodingContext, pointer: str, hint: typing.Any, text: str
    ) -> typing.Tuple[bool, typing.Any]:
        if hint is str or hint is typing.Any:
            return (True, text)
        if hint is bool:
            folded = text.strip().lower()
            if folded in _TRUE_STRINGS:
                return (True, True)
            if folded in _FALSE_STRINGS:
                return (True, False)
            ctx.error_occurred(pointer, f"{text!r} is not a boolean")
            return (False, None)
        if hint in (int, float):
            try:
                return (True, hint(text.strip()))
            except ValueError:
                ctx.error_occurred(pointer, f"{text!r} is not a valid {hint.__name__}")
                return (False, None)
        ctx.error_occurred(pointer, f"unsupported type {_type_repr(hint)}")
        return (False, None)
