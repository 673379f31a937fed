"""
Parsing, serialization and encoding of URIs.

The structured form of a URI is :class:`urllib.parse.SplitResult`. Python's own `urlsplit` is lenient,
so :func:`parse` first checks the source against the RFC 3986 character sets of each component.
"""

import re
import urllib.parse

from urllib.parse import SplitResult

from .constants import ENCODING
from .error import InvalidURI


_PCT_ENCODED = r"%[0-9A-Fa-f]{2}"
_UNRESERVED = r"A-Za-z0-9\-._~"
_SUB_DELIMS = r"!$&'()*+,;="


def _component(chars):
    return re.compile(rf"(?:[{chars}]|{_PCT_ENCODED})*")


_URI_CHARS = _component(_UNRESERVED + _SUB_DELIMS + r":/?#\[\]@")
_SCHEME = re.compile(r"[A-Za-z][A-Za-z0-9+\-.]*")
_USERINFO = _component(_UNRESERVED + _SUB_DELIMS + ":")
_REG_NAME = _component(_UNRESERVED + _SUB_DELIMS)
_IP_LITERAL = re.compile(rf"\[(?:[0-9A-Fa-f:.]+|v[0-9A-Fa-f]+\.[{_UNRESERVED}{_SUB_DELIMS}:]+)\]")
_PORT = re.compile(r"[0-9]*")
_PATH = _component(_UNRESERVED + _SUB_DELIMS + ":@/")
_QUERY = _component(_UNRESERVED + _SUB_DELIMS + ":@/?")

FRAGMENT_SAFE = _SUB_DELIMS + ":@/?"


def parse(text):
    """
    Parse the given `text` into a :class:`SplitResult`, or raise :class:`InvalidURI`.

    Examples:
        .. highlight:: python
        .. code-block:: python

            parse("https://example.com/a?b=1")  # SplitResult(scheme='https', netloc='example.com', ...)
            parse("https://example.com/>")  # raises InvalidURI
    """

    text = str(text)

    if not _URI_CHARS.fullmatch(text):
        raise InvalidURI(f"URI must be ASCII without spaces or unescaped delimiters: {text}")

    try:
        parts = urllib.parse.urlsplit(text)
    except ValueError as cause:
        raise InvalidURI(f"bad URI {text}: {cause}")

    if parts.scheme and not _SCHEME.fullmatch(parts.scheme):
        raise InvalidURI(f"bad URI scheme {parts.scheme} in {text}")

    userinfo, host, port = split_netloc(parts.netloc)

    if userinfo is not None and not _USERINFO.fullmatch(userinfo):
        raise InvalidURI(f"bad URI userinfo in {text}")
    elif not (_REG_NAME.fullmatch(host) or _IP_LITERAL.fullmatch(host)):
        raise InvalidURI(f"bad URI host {host} in {text}")
    elif port is not None and not _PORT.fullmatch(port):
        raise InvalidURI(f"bad URI port {port} in {text}")

    if not _PATH.fullmatch(parts.path):
        raise InvalidURI(f"bad URI path {parts.path} in {text}")
    elif not _QUERY.fullmatch(parts.query):
        raise InvalidURI(f"bad URI query {parts.query} in {text}")
    elif not _QUERY.fullmatch(parts.fragment):
        raise InvalidURI(f"bad URI fragment {parts.fragment} in {text}")

    return parts


def validate(text):
    """Return the given `text` if it is a syntactically valid URI, or raise :class:`InvalidURI`."""

    parse(text)
    return text


def unparse(parts):
    """Serialize the given :class:`SplitResult` back into a URI string."""

    return urllib.parse.urlunsplit(parts)


def split_netloc(netloc):
    """
    Split the given network location into a `(userinfo, host, port)` tuple.

    `userinfo` and `port` are `None` when absent, so that "h" and "h:" can be told apart.
    """

    userinfo, at, hostport = netloc.rpartition('@')
    userinfo = userinfo if at else None

    if hostport.startswith('[') and ']' in hostport:
        end = hostport.index(']') + 1
        host, rest = hostport[:end], hostport[end:]
        port = rest[1:] if rest.startswith(':') else (rest or None)
    else:
        host, colon, port = hostport.partition(':')
        port = port if colon else None

    return userinfo, host, port


def join_netloc(userinfo, host, port):
    """The inverse of :func:`split_netloc`."""

    netloc = host
    if userinfo is not None:
        netloc = f"{userinfo}@{netloc}"

    if port is not None:
        netloc = f"{netloc}:{port}"

    return netloc


def quote_segment(part):
    """Percent-encode the given `part` for use as a single path segment (a space becomes "%20", "/" becomes "%2F")."""

    return urllib.parse.quote(str(part), safe="", encoding=ENCODING)


def quote_fragment(fragment):
    """Percent-encode the given `fragment`, leaving the characters RFC 3986 allows in a fragment as they are."""

    return urllib.parse.quote(str(fragment), safe=FRAGMENT_SAFE, encoding=ENCODING)


def decode_query(query):
    """
    Decode the given form-encoded `query` into a `dict` mapping each name to the list of its values.

    Names keep the order in which they first appear, and the values of a repeated name keep their relative order.
    """

    params = {}

    for name, value in urllib.parse.parse_qsl(query or "", keep_blank_values=True, encoding=ENCODING):
        params.setdefault(name, []).append(value)

    return params


def encode_query(params):
    """
    Form-encode the given `params` (as returned by :func:`decode_query`) into a query string.

    A name with no values is omitted entirely.
    """

    return urllib.parse.urlencode(params, doseq=True, encoding=ENCODING)
