import enum
import typing


class ContentType(enum.IntEnum):
    UNKNOWN = 0
    PLAIN_TEXT = 1
    HTML = 2
    JSON = 3
    XML = 4
    FORM = 5
    EVENT_STREAM = 6


_MEDIA_TYPES: typing.Mapping[str, ContentType] = {
    "text/plain": ContentType.PLAIN_TEXT,
    "text/html": ContentType.HTML,
    "application/xhtml+xml": ContentType.HTML,
    "application/json": ContentType.JSON,
    "text/javascript": ContentType.JSON,
    "text/xml": ContentType.XML,
    "application/xml": ContentType.XML,
    "application/x-www-form-urlencoded": ContentType.FORM,
    "text/event-stream": ContentType.EVENT_STREAM,
}


def get_content_type(value: typing.Optional[str]) -> ContentType:
    """
    Classifies a ``Content-Type`` header value.  Parameters such as ``charset``
    are ignored.

    :param str value: the header value; may be empty or None.
    :return: the matching :py:class:`ContentType`, :py:attr:`ContentType.UNKNOWN` if there is none.
    """
    if not value:
        return ContentType.UNKNOWN
    media_type = value.split(";", 1)[0].strip().lower()
    return _MEDIA_TYPES.get(media_type, ContentType.UNKNOWN)
