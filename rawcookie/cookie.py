"""Cookie record: the RFC 6265 attribute set plus Max-Age and SameSite.

The record is a plain mutable value type.  Records compare equal only when
every field matches, which makes them usable for deduplication and tests but
not as cookie-jar identities (see :meth:`Cookie.has_same_identifier`).
"""

import datetime
import enum
import re
from http.cookies import Morsel
from typing import Any, Dict, Final, Optional, Union

import attr
from yarl import URL

from .helpers import format_http_date, is_ip_address, parse_http_date, unquote
from .log import internal_logger

__all__ = ("MAX_AGE_UNSET", "Cookie", "RawForm", "SameSite", "parse_max_age")

# Sentinel for "no Max-Age attribute"; 0 is a real value meaning "expire now".
MAX_AGE_UNSET: Final[int] = -(2**63)
_MAX_AGE_MAX: Final[int] = 2**63 - 1

_MAX_AGE_RE = re.compile(r"[+-]?[0-9]+")


class RawForm(enum.Enum):
    NAME_AND_VALUE_ONLY = 0
    FULL = 1


class SameSite(str, enum.Enum):
    STRICT = "Strict"
    LAX = "Lax"
    NONE = "None"


_SAME_SITE_TOKENS: Final[Dict[str, str]] = {
    member.value.lower(): member.value for member in SameSite
}


def _to_str(value: Union[str, bytes, None]) -> str:
    if value is None:
        return ""
    if isinstance(value, (bytes, bytearray)):
        return bytes(value).decode("latin-1")
    return value


def parse_max_age(value: Union[str, int, None]) -> Optional[int]:
    """Interpret a Max-Age value as a signed 64-bit integer.

    Returns None when the value is missing, malformed or out of range.
    """
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        number = value
    else:
        if not value:
            return None
        value = value.strip()
        if not _MAX_AGE_RE.fullmatch(value):
            return None
        number = int(value)
    # MAX_AGE_UNSET itself is reserved
    if not MAX_AGE_UNSET < number <= _MAX_AGE_MAX:
        return None
    return number


@attr.s(slots=True, on_setattr=attr.setters.convert)
class Cookie:
    name = attr.ib(type=str, default="", converter=_to_str)
    value = attr.ib(type=str, default="", converter=_to_str)
    domain = attr.ib(type=str, default="", converter=_to_str, eq=str.lower)
    path = attr.ib(type=str, default="", converter=_to_str)
    expiration_date = attr.ib(type=Optional[datetime.datetime], default=None)
    max_age = attr.ib(type=int, default=MAX_AGE_UNSET)
    secure = attr.ib(type=bool, default=False)
    http_only = attr.ib(type=bool, default=False)
    _same_site = attr.ib(type=str, default="", init=False)

    @property
    def same_site(self) -> str:
        return self._same_site

    def set_same_site(self, token: Union[str, bytes]) -> bool:
        """Set the SameSite attribute.

        *token* is matched case-insensitively against ``Strict``, ``Lax`` and
        ``None`` and stored in that canonical spelling.  Anything else leaves
        the current value alone and returns False.
        """
        canonical = _SAME_SITE_TOKENS.get(_to_str(token).strip().lower())
        if canonical is None:
            return False
        self._same_site = canonical
        return True

    @property
    def has_max_age(self) -> bool:
        return self.max_age != MAX_AGE_UNSET

    @property
    def is_session_cookie(self) -> bool:
        """True if the cookie carries neither Expires nor Max-Age."""
        return self.expiration_date is None and not self.has_max_age

    def has_same_identifier(self, other: "Cookie") -> bool:
        """Compare the (name, domain, path) triple a cookie jar keys on."""
        return (
            self.name == other.name
            and self.domain.lower() == other.domain.lower()
            and self.path == other.path
        )

    def normalize(self, url: Union[str, URL]) -> None:
        """Fill in Domain and Path defaults from the URL the cookie came from."""
        url = URL(url)

        if not self.path:
            path = url.path
            if not path.startswith("/"):
                path = "/"
            else:
                # Cut everything from the last slash to the end
                path = "/" + path[1 : path.rfind("/")]
            self.path = path

        if not self.domain:
            self.domain = url.raw_host or ""
        elif not self.domain.startswith(".") and not is_ip_address(self.domain):
            self.domain = "." + self.domain

    def to_raw_form(self, form: RawForm = RawForm.FULL) -> str:
        """Serialize to a ``Set-Cookie`` header value.

        Attributes are always emitted in the same order:
        Expires, Max-Age, Domain, Path, Secure, HttpOnly, SameSite.
        Values are written as they are; nothing is escaped.
        """
        parts = [f"{self.name}={self.value}"]
        if form is RawForm.NAME_AND_VALUE_ONLY:
            return parts[0]

        if self.expiration_date is not None:
            parts.append(f"Expires={format_http_date(self.expiration_date)}")
        if self.has_max_age:
            parts.append(f"Max-Age={self.max_age}")
        if self.domain:
            parts.append(f"Domain={self.domain}")
        if self.path:
            parts.append(f"Path={self.path}")
        if self.secure:
            parts.append("Secure")
        if self.http_only:
            parts.append("HttpOnly")
        if self._same_site:
            parts.append(f"SameSite={self._same_site}")
        return "; ".join(parts)

    def __bytes__(self) -> bytes:
        return self.to_raw_form().encode("latin-1")

    def swap(self, other: "Cookie") -> None:
        """Exchange the contents of two records in place."""
        for field in attr.fields(type(self)):
            mine = getattr(self, field.name)
            setattr(self, field.name, getattr(other, field.name))
            setattr(other, field.name, mine)

    def copy(self) -> "Cookie":
        new = type(self)()
        for field in attr.fields(type(self)):
            setattr(new, field.name, getattr(self, field.name))
        return new

    __copy__ = copy

    def __deepcopy__(self, memo: Dict[int, Any]) -> "Cookie":
        # every field holds an immutable value
        return self.copy()

    @classmethod
    def from_morsel(cls, morsel: "Morsel[str]") -> "Cookie":
        """Build a record from a stdlib ``Morsel``.

        Attributes the morsel does not carry keep their defaults; values that
        do not parse are dropped.
        """
        cookie = cls(morsel.key or "", morsel.coded_value or "")
        cookie.domain = morsel["domain"] or ""
        cookie.path = morsel["path"] or ""
        cookie.secure = bool(morsel["secure"])
        cookie.http_only = bool(morsel["httponly"])

        expires = morsel["expires"]
        if expires:
            expiration_date = (
                parse_http_date(expires) if isinstance(expires, str) else None
            )
            if expiration_date is None:
                internal_logger.debug(
                    "Dropping unparseable expires %r of cookie %r",
                    expires,
                    cookie.name,
                )
            cookie.expiration_date = expiration_date

        max_age = morsel["max-age"]
        if max_age != "":
            number = parse_max_age(max_age)
            if number is None:
                internal_logger.debug(
                    "Dropping invalid max-age %r of cookie %r", max_age, cookie.name
                )
            else:
                cookie.max_age = number

        same_site = morsel.get("samesite")
        if same_site and not cookie.set_same_site(same_site):
            internal_logger.debug(
                "Dropping invalid samesite %r of cookie %r", same_site, cookie.name
            )
        return cookie

    def to_morsel(self) -> "Morsel[str]":
        morsel: Morsel[str] = Morsel()
        # __setstate__ skips the key validation done by Morsel.set(); the
        # record may hold names the stdlib considers illegal.
        morsel.__setstate__(  # type: ignore[attr-defined]
            {"key": self.name, "value": unquote(self.value), "coded_value": self.value}
        )
        if self.expiration_date is not None:
            morsel["expires"] = format_http_date(self.expiration_date)
        if self.has_max_age:
            morsel["max-age"] = str(self.max_age)
        if self.domain:
            morsel["domain"] = self.domain
        if self.path:
            morsel["path"] = self.path
        if self.secure:
            morsel["secure"] = True
        if self.http_only:
            morsel["httponly"] = True
        if self._same_site:
            morsel["samesite"] = self._same_site
        return morsel
