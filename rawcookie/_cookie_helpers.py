"""
Cookie header parsing.

Both ``Set-Cookie`` values (one or more attributed cookies) and request
``Cookie`` values (plain ``name=value`` pairs) are handled here.  Parsing is
deliberately forgiving: malformed pieces are dropped and logged at DEBUG
level, the rest of the header is kept and nothing is raised.
"""

import re
from typing import Callable, Dict, Iterable, List, Optional, Tuple, Union

from multidict import MultiMapping

from . import hdrs
from .cookie import Cookie, parse_max_age
from .helpers import parse_http_date, unquote
from .log import parser_logger

__all__ = (
    "cookies_from_headers",
    "parse_cookie_header",
    "parse_cookies",
    "parse_set_cookie_headers",
)

HeaderType = Union[str, bytes, bytearray, memoryview]

# A double-quoted value, backslash escapes allowed
_QUOTED_VALUE_RE = re.compile(r'"(?:[^"\\]|\\.)*"')
# Matched at a comma: the comma starts a new cookie only if whitespace and
# a "name=" token follow, as in legacy folded Set-Cookie headers.
_COOKIE_BOUNDARY_RE = re.compile(r",\s+[^\s=;,]+\s*=")
# "Wed" in "Expires=Wed, 09 Jun 2021 10:18:14 GMT"
_WEEKDAY_RE = re.compile(r"[A-Za-z]+")


def _decode(header: HeaderType, encoding: str) -> str:
    if isinstance(header, str):
        return header
    if isinstance(header, (bytes, bytearray, memoryview)):
        return bytes(header).decode(encoding, "replace")
    raise TypeError(f"{header!r} [{type(header)}] is not a str or bytes")


def _scan_field(
    text: str, pos: int, *, comma_boundary: bool = True
) -> Tuple[str, Optional[str], int]:
    """Scan one ``name[=value]`` field starting at *pos*.

    Returns the stripped name, the stripped value (None when the field has
    no ``=``) and the index of the terminating ``;``/``,`` or ``len(text)``.
    """
    n = len(text)
    i = pos
    eq = -1
    while i < n:
        c = text[i]
        if c == ";":
            break
        if c == "=":
            if eq < 0:
                eq = i
        elif c == '"':
            if eq >= 0 and not text[eq + 1 : i].strip():
                match = _QUOTED_VALUE_RE.match(text, i)
                if match is not None:
                    i = match.end()
                    continue
            # an unmatched quote is an ordinary character
        elif c == "," and comma_boundary and _COOKIE_BOUNDARY_RE.match(text, i):
            if not (
                eq >= 0
                and text[pos:eq].strip().lower() == "expires"
                and _WEEKDAY_RE.fullmatch(text[eq + 1 : i].strip())
            ):
                break
        i += 1

    if eq < 0:
        return text[pos:i].strip(), None, i
    return text[pos:eq].strip(), text[eq + 1 : i].strip(), i


def _set_expires(cookie: Cookie, value: Optional[str]) -> None:
    expiration_date = parse_http_date(value)
    if expiration_date is None:
        parser_logger.debug(
            "Dropping unparseable Expires %r of cookie %r", value, cookie.name
        )
        return
    cookie.expiration_date = expiration_date


def _set_max_age(cookie: Cookie, value: Optional[str]) -> None:
    max_age = parse_max_age(value)
    if max_age is None:
        parser_logger.debug(
            "Dropping invalid Max-Age %r of cookie %r", value, cookie.name
        )
        return
    cookie.max_age = max_age


def _set_domain(cookie: Cookie, value: Optional[str]) -> None:
    cookie.domain = value or ""


def _set_path(cookie: Cookie, value: Optional[str]) -> None:
    cookie.path = value or ""


def _set_secure(cookie: Cookie, value: Optional[str]) -> None:
    # Boolean attribute with any value should be True
    cookie.secure = True


def _set_http_only(cookie: Cookie, value: Optional[str]) -> None:
    cookie.http_only = True


def _set_same_site(cookie: Cookie, value: Optional[str]) -> None:
    if not cookie.set_same_site(value or ""):
        parser_logger.debug(
            "Dropping invalid SameSite %r of cookie %r", value, cookie.name
        )


_ATTRIBUTE_HANDLERS: Dict[str, Callable[[Cookie, Optional[str]], None]] = {
    "expires": _set_expires,
    "max-age": _set_max_age,
    "domain": _set_domain,
    "path": _set_path,
    "secure": _set_secure,
    "httponly": _set_http_only,
    "samesite": _set_same_site,
}


def _apply_attribute(cookie: Cookie, name: str, value: Optional[str]) -> None:
    handler = _ATTRIBUTE_HANDLERS.get(name.lower())
    if handler is None:
        parser_logger.debug(
            "Ignoring unknown attribute %r of cookie %r", name, cookie.name
        )
        return
    handler(cookie, None if value is None else unquote(value))


def _parse_cookie_scope(text: str, pos: int, cookies: List[Cookie]) -> int:
    """Parse one cookie and its attributes, return where the next one starts."""
    n = len(text)
    name, value, end = _scan_field(text, pos)

    cookie: Optional[Cookie] = None
    if value is not None:
        cookie = Cookie(name, value)
    elif name:
        # no "=": the whole token is the value
        cookie = Cookie("", name)
    elif end < n and text[end] == ";":
        parser_logger.debug(
            "Discarding attributes without a cookie at %d in %r", pos, text
        )

    while end < n and text[end] == ";":
        attr_name, attr_value, end = _scan_field(text, end + 1)
        if cookie is not None and attr_name:
            _apply_attribute(cookie, attr_name, attr_value)

    if cookie is not None:
        cookies.append(cookie)
    # skip the separating comma
    return end + 1


def parse_cookies(header: HeaderType, *, encoding: str = "latin-1") -> List[Cookie]:
    """
    Parse a ``Set-Cookie`` header value into a list of cookies.

    The value may hold several cookies joined by commas, as produced by
    proxies that fold repeated ``Set-Cookie`` headers into one line.  A comma
    is taken as a cookie separator only when whitespace and a ``name=`` token
    follow it; the comma inside an ``Expires`` date is never one.

    Known attributes (Expires, Max-Age, Domain, Path, Secure, HttpOnly,
    SameSite) are matched case-insensitively.  Unknown attributes and values
    that do not parse are dropped without affecting the rest of the cookie.
    Empty input gives an empty list.

    *encoding* is used to decode ``bytes`` input.
    """
    text = _decode(header, encoding)
    cookies: List[Cookie] = []

    n = len(text)
    pos = 0
    while pos < n:
        pos = _parse_cookie_scope(text, pos, cookies)
    return cookies


def parse_cookie_header(
    header: HeaderType, *, encoding: str = "latin-1"
) -> List[Cookie]:
    """
    Parse a request ``Cookie`` header value.

    Every ``;``-separated ``name=value`` pair becomes its own cookie.  Commas
    are ordinary value characters here and no attributes are interpreted.
    Legacy RFC 2965 ``$Version``/``$Path``/``$Domain`` entries are skipped.
    """
    text = _decode(header, encoding)
    cookies: List[Cookie] = []

    n = len(text)
    pos = 0
    while pos < n:
        name, value, end = _scan_field(text, pos, comma_boundary=False)
        pos = end + 1

        if name.startswith("$"):
            continue
        if value is not None:
            cookies.append(Cookie(name, value))
        elif name:
            cookies.append(Cookie("", name))
    return cookies


def parse_set_cookie_headers(
    headers: Iterable[HeaderType], *, encoding: str = "latin-1"
) -> List[Cookie]:
    """Parse several ``Set-Cookie`` header values, keeping their order."""
    cookies: List[Cookie] = []
    for header in headers:
        cookies.extend(parse_cookies(header, encoding=encoding))
    return cookies


def cookies_from_headers(
    headers: "MultiMapping[str]", *, request: bool = False, encoding: str = "latin-1"
) -> List[Cookie]:
    """Collect cookies from a multidict of HTTP headers.

    Reads every ``Set-Cookie`` header, or every ``Cookie`` header when
    *request* is true.
    """
    if request:
        cookies: List[Cookie] = []
        for header in headers.getall(hdrs.COOKIE, ()):
            cookies.extend(parse_cookie_header(header, encoding=encoding))
        return cookies
    return parse_set_cookie_headers(
        headers.getall(hdrs.SET_COOKIE, ()), encoding=encoding
    )
