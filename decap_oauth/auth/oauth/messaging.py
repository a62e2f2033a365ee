"""Popup page that hands the access token to the opener window.

The handshake Decap CMS expects:

1. The popup posts ``authorizing:{provider}`` to the opener with target ``*``.
2. The opener answers with a ``message`` event.
3. If the event origin is allowed, the popup posts
   ``authorization:{provider}:{status}:{json}`` to that origin only and stops
   listening.

Origin entries are matched as follows. An entry containing ``://`` must equal
the origin exactly. An entry starting with ``*.`` matches any subdomain of
the rest, on any port. Any other entry must equal the origin's host,
including the port when the origin has one. An empty allow-list accepts every origin.
"""

import json
import re
from collections.abc import Sequence


_SCHEME_RE = re.compile(r"^[a-z][a-z0-9+.-]*://", re.IGNORECASE)
_PORT_RE = re.compile(r":\d+$")

_JS_ESCAPES = {
    "\\": "\\\\",
    "'": "\\'",
    "\n": "\\n",
    "\r": "\\r",
    "<": "\\x3c",
    ">": "\\x3e",
    "&": "\\x26",
    "\u2028": "\\u2028",
    "\u2029": "\\u2029",
}

_JS_ESCAPE_RE = re.compile("|".join(re.escape(char) for char in _JS_ESCAPES))

LOGIN_PAGE_TEMPLATE = """<!doctype html>
<html>
<head>
<meta charset="utf-8">
<title>Authorizing</title>
</head>
<body>
<script>
  (function () {
    const allowedOrigins = %(origins)s;

    const originAllowed = (origin) => {
      if (allowedOrigins.length === 0) {
        return true;
      }
      const host = origin.replace(/^[a-z][a-z0-9+.-]*:\\/\\//i, '');
      return allowedOrigins.some((entry) => {
        if (entry.indexOf('://') !== -1) {
          return origin === entry;
        }
        if (entry.indexOf('*.') === 0) {
          return host.replace(/:\\d+$/, '').endsWith(entry.slice(1));
        }
        return host === entry;
      });
    };

    const receiveMessage = (e) => {
      if (!originAllowed(e.origin)) {
        return;
      }

      window.opener.postMessage(
        %(message)s,
        e.origin
      );

      window.removeEventListener('message', receiveMessage, false);
    };
    window.addEventListener('message', receiveMessage, false);

    window.opener.postMessage(%(handshake)s, '*');
  })();
</script>
</body>
</html>
"""


def js_string(value: str) -> str:
    """Quote ``value`` as a single-quoted JavaScript literal safe inside <script>."""
    return "'" + _JS_ESCAPE_RE.sub(lambda m: _JS_ESCAPES[m.group(0)], value) + "'"


def _js_array(values: Sequence[str]) -> str:
    return "[" + ", ".join(js_string(value) for value in values) + "]"


def origin_allowed(origin: str, allowed_origins: Sequence[str]) -> bool:
    """Apply the page's origin rule server-side.

    Mirrors ``originAllowed`` in the rendered script.
    """
    if not allowed_origins:
        return True
    host = _SCHEME_RE.sub("", origin)
    for entry in allowed_origins:
        if "://" in entry:
            if origin == entry:
                return True
        elif entry.startswith("*."):
            if _PORT_RE.sub("", host).endswith(entry[1:]):
                return True
        elif host == entry:
            return True
    return False


def build_authorization_message(provider: str, status: str, access_token: str) -> str:
    """Build the message Decap CMS parses from the popup."""
    payload = json.dumps(
        {"token": access_token, "provider": provider}, separators=(",", ":")
    )
    return f"authorization:{provider}:{status}:{payload}"


def render_login_page(
    provider: str,
    status: str,
    access_token: str,
    allowed_origins: Sequence[str],
) -> str:
    """Render the popup page delivering the token to the opener.

    Args:
        provider: Provider name echoed back to the CMS
        status: ``success`` or ``failure``
        access_token: Token to deliver; only ever posted to an allowed origin
        allowed_origins: Origin allow-list, empty for unrestricted

    Returns:
        HTML document
    """
    return LOGIN_PAGE_TEMPLATE % {
        "origins": _js_array(allowed_origins),
        "message": js_string(
            build_authorization_message(provider, status, access_token)
        ),
        "handshake": js_string(f"authorizing:{provider}"),
    }
