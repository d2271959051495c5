import typing

_TOKEN_PUNCTUATION = frozenset("!#$%&'*+-.^_`|~")


def english_enumerate(items: typing.Iterable[str], conj: str = "and") -> str:
    buf = list(items)
    if len(buf) <= 1:
        return "".join(buf)
    if len(buf) == 2:
        return f"{buf[0]} {conj} {buf[1]}"
    return ", ".join(buf[:-1]) + f", {conj} {buf[-1]}"


def _is_token_char(c: str) -> bool:
    return c.isascii() and (c.isalnum() or c in _TOKEN_PUNCTUATION)


def canonical_header_key(name: str) -> str:
    """
    Returns the canonical form of a header name: the first letter and every
    letter following a hyphen are upper-cased, the rest lower-cased, so that
    ``content-type`` becomes ``Content-Type``.  A name containing a character
    that is not allowed in a header name is returned unchanged.
    """
    if not name or not all(_is_token_char(c) for c in name):
        return name
    buf = []
    upper = True
    for c in name:
        buf.append(c.upper() if upper else c.lower())
        upper = c == "-"
    return "".join(buf)


def escape_pointer_token(token: str) -> str:
    return token.replace("~", "~0").replace("/", "~1")
