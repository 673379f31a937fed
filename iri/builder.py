"""An immutable URI builder."""

import json

from collections.abc import Mapping
from enum import Enum
from urllib.parse import SplitResult

from . import uri
from .constants import ENCODING, ROOT, debug
from .error import InvalidArgument, InvalidURI


class Iri(object):
    """
    An immutable URI which can be transformed into a new URI with a fluent chain of method calls.

    By default an `Iri` never raises an exception because of a malformed source: the source is assumed to be "/".
    Pass `safe=False` to raise :class:`InvalidURI` instead.

    Examples:
        .. highlight:: python
        .. code-block:: python

            url = Iri("http://google.com/") \\
                .add(q="books about OOP", limit=50) \\
                .delete("q", "limit") \\
                .over(q="books about tennis", limit=10) \\
                .scheme("https") \\
                .host("localhost") \\
                .port(443)

            str(url)  # "https://localhost:443/?q=books+about+tennis&limit=10"
    """

    def __init__(self, source="", local=False, safe=True):
        if source is None:
            raise InvalidArgument("cannot build a URI from None")

        if isinstance(source, Iri):
            self._uri = source._uri if source._safe == bool(safe) else None
            source = source._source
        elif isinstance(source, SplitResult):
            self._uri = source
        else:
            self._uri = None

        self._source = source
        self._local = bool(local)
        self._safe = bool(safe)

    def __eq__(self, other):
        if not isinstance(other, (Iri, str)):
            return NotImplemented

        return str(self) == str(other)

    def __hash__(self):
        return hash(str(self))

    def __repr__(self):
        return f"Iri({self.inspect()})"

    def __str__(self):
        u = self._the_uri()

        if self._local:
            return ''.join([
                u.path,
                f"?{u.query}" if u.query else "",
                f"#{u.fragment}" if u.fragment else "",
            ])
        else:
            return uri.unparse(u)

    @property
    def source(self):
        """The value this `Iri` was constructed from."""

        return self._source

    @property
    def local(self):
        """`True` if this `Iri` renders only its path, query, and fragment."""

        return self._local

    @property
    def safe(self):
        """`True` if a malformed source is treated as "/" instead of raising :class:`InvalidURI`."""

        return self._safe

    def inspect(self):
        """Return the original source of this `Iri` as a double-quoted string, without parsing it."""

        if isinstance(self._source, SplitResult):
            return json.dumps(uri.unparse(self._source), ensure_ascii=False)
        else:
            return json.dumps(str(self._source), ensure_ascii=False)

    def to_uri(self):
        """
        Return the parsed form of this `Iri` as a :class:`urllib.parse.SplitResult`.

        The result is an immutable named tuple; use its `_replace` method to derive a modified copy.
        """

        return self._the_uri()

    def to_local(self):
        """
        Return a new `Iri` which renders only the path, query, and fragment of this one.

        For example, "https://google.com/foo?x=1" becomes "/foo?x=1".
        """

        return Iri(self, local=True, safe=self._safe)

    def add(self, params=None, /, **kwargs):
        """
        Add query parameters, given as a `Mapping` or as keyword arguments.

        Values are added even if the same name is already present, so `Iri("/").add(a=1).add(a=2)` is "/?a=1&a=2".
        Call :meth:`delete` first to make sure there is only one value for a name. A value of `None` is skipped.
        """

        pairs = _pairs(params, kwargs, "add")

        def update(query):
            for name, value in pairs:
                if value is not None:
                    query.setdefault(name, []).append(_text(value))

        return self._modify_query(update)

    def delete(self, *names):
        """Remove every value of each of the given query parameter `names`. Absent names are ignored."""

        names = [_required(name, "query parameter name") for name in names]

        def update(query):
            for name in names:
                query.pop(name, None)

        return self._modify_query(update)

    def over(self, params=None, /, **kwargs):
        """
        Replace query parameters, given as a `Mapping` or as keyword arguments.

        Each name is left with exactly one value, in the position where it first appeared.
        A value of `None` removes the name entirely, instead of leaving a bare "name" with no value.

        Example:
            .. highlight:: python
            .. code-block:: python

                Iri("http://google/?a=1&b=2&a=33").over(a="hey")  # "http://google/?a=hey&b=2"
        """

        pairs = _pairs(params, kwargs, "over")

        def update(query):
            for name, value in pairs:
                query[name] = [] if value is None else [_text(value)]

        return self._modify_query(update)

    with_ = over
    without = delete

    def scheme(self, value):
        """Replace the scheme, like "https" or "http"."""

        value = _required(value, "scheme")
        return self._modify(lambda u: u._replace(scheme=value))

    def host(self, value):
        """Replace the host, like "google.com" or "192.168.0.1"."""

        value = _required(value, "host")

        def update(u):
            userinfo, _host, port = uri.split_netloc(u.netloc)
            return u._replace(netloc=uri.join_netloc(userinfo, value, port))

        return self._modify(update)

    def port(self, value):
        """Replace the TCP port, like 8080 or "443"."""

        value = _required(value, "port")

        def update(u):
            userinfo, host, _port = uri.split_netloc(u.netloc)
            return u._replace(netloc=uri.join_netloc(userinfo, host, value))

        return self._modify(update)

    def path(self, value):
        """Replace the path, like "/foo/bar"."""

        value = _required(value, "path")
        return self._modify(lambda u: u._replace(path=value))

    def query(self, value):
        """Replace the entire query string, like "a=1&b=2"."""

        value = _required(value, "query")
        return self._modify(lambda u: u._replace(query=value))

    def fragment(self, value):
        """Replace the fragment. The given `value` is percent-encoded, so "test me" becomes "test%20me"."""

        value = uri.quote_fragment(_required(value, "fragment"))
        return self._modify(lambda u: u._replace(fragment=value))

    def cut(self, path=ROOT):
        """
        Remove the query and fragment and replace the path.

        Example:
            .. highlight:: python
            .. code-block:: python

                Iri("https://google.com/a/b?q=test").cut("/hello")  # "https://google.com/hello"
        """

        path = _required(path, "path")
        return self._modify(lambda u: u._replace(path=path, query="", fragment=""))

    def append(self, part):
        """
        Append a segment to the path. The segment is percent-encoded, so it cannot add more than one segment.

        Example:
            .. highlight:: python
            .. code-block:: python

                Iri("https://google.com/a/b?q=test").append("hello")  # "https://google.com/a/b/hello?q=test"
        """

        segment = uri.quote_segment(_required(part, "path segment"))

        def update(u):
            path = u.path if u.path.endswith('/') else u.path + '/'
            return u._replace(path=path + segment)

        return self._modify(update)

    def _the_uri(self):
        if self._uri is None:
            try:
                self._uri = uri.parse(self._source)
            except InvalidURI as cause:
                if not self._safe:
                    raise

                debug(lambda: f"{self.inspect()} is not a valid URI, using {ROOT} instead: {cause}")
                self._uri = uri.parse(ROOT)

        return self._uri

    def _modify(self, update):
        return Iri(update(self._the_uri()), self._local, self._safe)

    def _modify_query(self, update):
        def modify(u):
            query = uri.decode_query(u.query)
            update(query)
            return u._replace(query=uri.encode_query(query))

        return self._modify(modify)


def _pairs(params, kwargs, method):
    if kwargs and params is not None:
        raise InvalidArgument(f"Iri.{method} takes a Mapping or kwargs, not both")

    params = kwargs if kwargs else params

    if not isinstance(params, Mapping):
        raise InvalidArgument(f"Iri.{method} expects a Mapping of query parameters, not {params!r}")

    return [(_text(name), value) for name, value in params.items()]


def _required(value, name):
    if value is None:
        raise InvalidArgument(f"{name} is required")

    return _text(value)


def _text(value):
    if isinstance(value, Enum):
        value = value.value

    if isinstance(value, bytes):
        return value.decode(ENCODING)
    else:
        return str(value)
