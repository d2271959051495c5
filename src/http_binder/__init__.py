from .accessor import Accessor  # noqa
from .binder import Binder, BinderConfig  # noqa
from .content_type import ContentType, get_content_type  # noqa
from .decoders import JSONBodyDecoder, XMLBodyDecoder, parse_form_body  # noqa
from .exceptions import (  # noqa
    BindingError,
    BodyDecodeError,
    ConversionError,
    HTTPBinderException,
    InvalidTargetError,
    join_errors,
)
from .interfaces import BodyDecoder, Request, StringsUnmarshaler, UriParamGetter  # noqa
from .models import ALL_CATEGORIES, Category, FieldDescriptor  # noqa
