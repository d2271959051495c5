from .formatting import canonical_header_key, english_enumerate, escape_pointer_token  # noqa
from .typing import (  # noqa
    is_record_type,
    sequence_item_type,
    unwrap_optional,
)
