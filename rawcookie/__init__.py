__version__ = "1.0.0a1.dev0"

from typing import Tuple

from . import hdrs
from ._cookie_helpers import (
    cookies_from_headers,
    parse_cookie_header,
    parse_cookies,
    parse_set_cookie_headers,
)
from .cookie import MAX_AGE_UNSET, Cookie, RawForm, SameSite, parse_max_age
from .helpers import format_http_date, parse_http_date

__all__: Tuple[str, ...] = (
    "hdrs",
    # cookie
    "MAX_AGE_UNSET",
    "Cookie",
    "RawForm",
    "SameSite",
    "parse_max_age",
    # parsing
    "cookies_from_headers",
    "parse_cookie_header",
    "parse_cookies",
    "parse_set_cookie_headers",
    # dates
    "format_http_date",
    "parse_http_date",
)
