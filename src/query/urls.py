"""URL normalization used by the `url` field validator.

Inputs without a scheme are treated as `https` URLs. Hierarchical schemes (`http`, `https`, `ws`,
`wss`, `ftp`, `file`) are parsed and rewritten into one canonical form; any other scheme is opaque
and kept as typed. Normalizing an already normalized URL returns it unchanged.
"""

from __future__ import annotations

import ipaddress
import re
from urllib.parse import quote, unquote


class UrlError(ValueError):
    """Raised when a value cannot be normalized into an absolute URL."""


_SCHEME_RE = re.compile(r"^([A-Za-z][A-Za-z0-9+.\-]*):")

# Hierarchical schemes and their default ports.
_SPECIAL_SCHEMES: dict[str, int | None] = {
    "http": 80,
    "https": 443,
    "ws": 80,
    "wss": 443,
    "ftp": 21,
    "file": None,
}

_DEFAULT_SCHEME = "https"

_STRIP_CHARS = "".join(chr(code) for code in range(0x21))
_FORBIDDEN_HOST_CHARS = frozenset(" #%/:<>?@[\\]^|")

_USERINFO_SAFE = "%!$&'()*+,;=:-._~"
_PATH_SAFE = "%!$&'()*+,;=:@/-._~"
_QUERY_SAFE = "%!$&()*+,;=:@/?-._~"
_FRAGMENT_SAFE = "%!$&'()*+,;=:@/?#-._~"


def split_scheme(value: str) -> tuple[str, str] | None:
    """Split `scheme:rest` into `(scheme, rest)`; `None` when the value has no scheme."""

    match = _SCHEME_RE.match(value)
    if match is None:
        return None
    return match.group(1).lower(), value[match.end():]


def _split_host_port(hostport: str) -> tuple[str, str]:
    if hostport.startswith("["):
        close = hostport.find("]")
        if close < 0:
            raise UrlError("unterminated IPv6 address")
        host, after = hostport[: close + 1], hostport[close + 1:]
        if after and not after.startswith(":"):
            raise UrlError("unexpected characters after IPv6 address")
        return host, after[1:]

    host, _, port = hostport.partition(":")
    return host, port


def _normalize_port(port: str, scheme: str) -> str:
    if not port:
        return ""
    if not (port.isascii() and port.isdigit()):
        raise UrlError(f"invalid port {port!r}")

    number = int(port)
    if number > 65535:
        raise UrlError(f"port {number} is out of range")
    if number == _SPECIAL_SCHEMES[scheme]:
        return ""
    return str(number)


def _normalize_host(host: str, scheme: str) -> str:
    if host.startswith("["):
        try:
            address = ipaddress.IPv6Address(host[1:-1])
        except ValueError as exc:
            raise UrlError(f"invalid IPv6 address {host!r}") from exc
        return f"[{address.compressed}]"

    host = unquote(host)
    if not host:
        if scheme == "file":
            return ""
        raise UrlError("URL has no host")

    if any(ch in _FORBIDDEN_HOST_CHARS or ord(ch) < 0x20 or ord(ch) == 0x7F for ch in host):
        raise UrlError(f"invalid host {host!r}")

    if not host.isascii():
        try:
            host = host.encode("idna").decode("ascii")
        except UnicodeError as exc:
            raise UrlError(f"invalid host {host!r}") from exc

    return host.lower()


def _normalize_path(path: str) -> str:
    """Resolve dot segments and percent-encode unsafe characters; an empty path becomes `/`."""

    output: list[str] = []
    segments = path.removeprefix("/").split("/")
    for index, segment in enumerate(segments):
        last = index == len(segments) - 1
        if segment == ".":
            if last:
                output.append("")
        elif segment == "..":
            if output:
                output.pop()
            if last:
                output.append("")
        else:
            output.append(segment)

    return "/" + "/".join(quote(segment, safe=_PATH_SAFE) for segment in output)


def _normalize_hierarchical(scheme: str, rest: str) -> str:
    rest, hash_sep, fragment = rest.partition("#")
    rest, query_sep, query = rest.partition("?")
    rest = rest.replace("\\", "/")

    if scheme == "file":
        if rest.startswith("//"):
            authority, slash, path = rest[2:].partition("/")
            path = slash + path
        else:
            authority, path = "", rest
    else:
        # Any number of slashes may separate the scheme from the authority.
        authority, slash, path = rest.lstrip("/").partition("/")
        path = slash + path

    userinfo, _, hostport = authority.rpartition("@")
    host, port = _split_host_port(hostport)
    host = _normalize_host(host, scheme)
    port = _normalize_port(port, scheme)

    netloc = host
    if userinfo:
        netloc = f"{quote(userinfo, safe=_USERINFO_SAFE)}@{netloc}"
    if port:
        netloc = f"{netloc}:{port}"

    result = f"{scheme}://{netloc}{_normalize_path(path)}"
    if query_sep:
        result += "?" + quote(query, safe=_QUERY_SAFE)
    if hash_sep:
        result += "#" + quote(fragment, safe=_FRAGMENT_SAFE)
    return result


def normalize_url(value: str) -> str:
    """Normalize a user-supplied URL into its canonical absolute form.

    Examples:
        >>> normalize_url("foo.com")
        'https://foo.com/'
        >>> normalize_url("//foo")
        'https://foo/'
        >>> normalize_url("https://foo.com?q=a")
        'https://foo.com/?q=a'
        >>> normalize_url("about:blank")
        'about:blank'

    Raises:
        UrlError: If the value has no usable host or cannot be parsed.
    """

    value = value.strip(_STRIP_CHARS)
    value = value.replace("\t", "").replace("\n", "").replace("\r", "")

    parts = split_scheme(value)
    if parts is None:
        parts = (_DEFAULT_SCHEME, "//" + value.lstrip("/"))

    scheme, rest = parts
    if scheme not in _SPECIAL_SCHEMES:
        return f"{scheme}:{rest}"
    return _normalize_hierarchical(scheme, rest)
