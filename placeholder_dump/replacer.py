"""
Placeholder replacer.

Placeholders are ``{key}`` tokens. Keys are looked up in the static values
first, then in each registered provider, then in the global provider
(``env.*``, ``system.*``, ``time.now*``). Unknown keys resolve to the
``empty`` argument of :meth:`Replacer.replace_all`.

Request replacers expose the ``http.request.*`` vocabulary together with
the short forms used in directive files (``{method}``, ``{path}``,
``{header.User-Agent}`` and so on).
"""

from __future__ import annotations

import os
import platform
import socket
import time
import uuid
from datetime import datetime
from typing import Any, Callable, Dict, List, Optional, Tuple

Provider = Callable[[str], Tuple[Any, bool]]

# short form -> canonical key; entries ending in "." are prefixes
SHORTHANDS = {
    "method": "http.request.method",
    "path": "http.request.uri.path",
    "host": "http.request.host",
    "hostport": "http.request.hostport",
    "port": "http.request.port",
    "query": "http.request.uri.query",
    "uri": "http.request.uri",
    "scheme": "http.request.scheme",
    "remote": "http.request.remote",
    "remote_host": "http.request.remote.host",
    "remote_port": "http.request.remote.port",
    "header.": "http.request.header.",
    "cookie.": "http.request.cookie.",
    "query.": "http.request.uri.query.",
}


def expand_shorthand(key: str) -> str:
    if key in SHORTHANDS:
        return SHORTHANDS[key]
    prefix, dot, rest = key.partition(".")
    if dot and rest and (prefix + ".") in SHORTHANDS:
        return SHORTHANDS[prefix + "."] + rest
    return key


def global_provider(key: str) -> Tuple[Any, bool]:
    if key.startswith("env."):
        return os.environ.get(key[4:], ""), True

    if key == "system.hostname":
        return socket.gethostname(), True
    if key == "system.os":
        return platform.system().lower(), True
    if key == "system.arch":
        return platform.machine().lower(), True
    if key == "system.wd":
        return os.getcwd(), True
    if key == "system.slash":
        return os.sep, True

    if key.startswith("time.now"):
        now = datetime.now().astimezone()
        if key == "time.now":
            return now.isoformat(), True
        if key == "time.now.unix":
            return int(now.timestamp()), True
        if key == "time.now.unix_ms":
            return int(now.timestamp() * 1000), True
        if key == "time.now.common_log":
            return now.strftime("%d/%b/%Y:%H:%M:%S %z"), True
        if key == "time.now.year":
            return now.year, True
        if key == "time.now.http":
            return time.strftime("%a, %d %b %Y %H:%M:%S GMT", time.gmtime(now.timestamp())), True

    return None, False


def _split_host_port(hostport: str) -> Tuple[str, str]:
    if hostport.startswith("["):
        host, _, rest = hostport[1:].partition("]")
        return host, rest[1:] if rest.startswith(":") else ""
    if hostport.count(":") == 1:
        host, _, port = hostport.partition(":")
        return host, port
    return hostport, ""


def request_provider(request) -> Provider:
    """Build a provider over a Werkzeug/Flask request object."""
    request_id: List[str] = []

    def provide(key: str) -> Tuple[Any, bool]:
        if not key.startswith("http.request."):
            return None, False
        field = key[len("http.request."):]

        if field == "method":
            return request.method, True
        if field == "scheme":
            return request.scheme, True
        if field == "hostport":
            return request.host, True
        if field == "host":
            return _split_host_port(request.host)[0], True
        if field == "port":
            port = _split_host_port(request.host)[1]
            if not port:
                port = "443" if request.scheme == "https" else "80"
            return port, True
        if field == "proto":
            return request.environ.get("SERVER_PROTOCOL", ""), True
        if field == "uri.path":
            return request.path, True
        if field == "uri.query":
            return request.query_string.decode("utf-8", "replace"), True
        if field in ("uri", "orig_uri"):
            qs = request.query_string.decode("utf-8", "replace")
            return request.path + ("?" + qs if qs else ""), True
        if field == "remote.host":
            return request.remote_addr or "", True
        if field == "remote.port":
            return request.environ.get("REMOTE_PORT", ""), True
        if field == "remote":
            host = request.remote_addr or ""
            port = request.environ.get("REMOTE_PORT", "")
            return f"{host}:{port}" if port else host, True
        if field == "uuid":
            if not request_id:
                request_id.append(str(uuid.uuid4()))
            return request_id[0], True

        if field.startswith("header."):
            return ",".join(request.headers.getlist(field[len("header."):])), True
        if field.startswith("cookie."):
            return request.cookies.get(field[len("cookie."):], ""), True
        if field.startswith("uri.query."):
            return ",".join(request.args.getlist(field[len("uri.query."):])), True

        return None, False

    return provide


class Replacer:
    """Resolves ``{placeholders}`` in strings."""

    def __init__(self, values: Optional[Dict[str, Any]] = None):
        self.static: Dict[str, Any] = dict(values or {})
        self.providers: List[Provider] = []

    @classmethod
    def for_request(cls, request, values: Optional[Dict[str, Any]] = None) -> "Replacer":
        repl = cls(values)
        repl.map(request_provider(request))
        return repl

    def map(self, provider: Provider) -> None:
        self.providers.append(provider)

    def set(self, key: str, value: Any) -> None:
        self.static[key] = value

    def delete(self, key: str) -> None:
        self.static.pop(key, None)

    def get(self, key: str) -> Tuple[Any, bool]:
        if key in self.static:
            return self.static[key], True
        key = expand_shorthand(key)
        if key in self.static:
            return self.static[key], True
        for provider in self.providers:
            value, found = provider(key)
            if found:
                return value, True
        return global_provider(key)

    def replace_all(self, text: str, empty: str = "") -> str:
        """Replace every placeholder in ``text``.

        ``\\{`` and ``\\}`` produce literal braces; an unterminated ``{``
        is copied through unchanged.
        """
        out: List[str] = []
        i, n = 0, len(text)
        while i < n:
            c = text[i]
            if c == "\\" and i + 1 < n and text[i + 1] in "{}":
                out.append(text[i + 1])
                i += 2
                continue
            if c != "{":
                out.append(c)
                i += 1
                continue

            end = text.find("}", i + 1)
            if end < 0:
                out.append(text[i:])
                break

            value, found = self.get(text[i + 1:end])
            if not found or value is None or value == "":
                out.append(empty)
            else:
                out.append(str(value))
            i = end + 1
        return "".join(out)
