"""Small HTTP response helpers."""

import re
from urllib.parse import quote

import falcon
import falcon.asgi

_CONTROL_CHARS = re.compile(r"[\x00-\x1f\x7f]")


def redirect(resp: falcon.asgi.Response, location: str) -> None:
    """303 See Other so the browser follows with GET."""
    resp.status = falcon.HTTP_303
    resp.location = location


def content_disposition(filename: str, attachment: bool = True) -> str:
    """Content-Disposition value with an ASCII fallback and RFC 5987 filename*.

    Control characters are removed; they are not allowed in header values.
    """
    kind = "attachment" if attachment else "inline"
    filename = _CONTROL_CHARS.sub("", filename)
    fallback = filename.encode("ascii", "replace").decode("ascii").replace('"', "")
    return f"{kind}; filename=\"{fallback}\"; filename*=UTF-8''{quote(filename, safe='')}"
