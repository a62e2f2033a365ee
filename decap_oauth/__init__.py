"""Decap CMS OAuth relay.

Lets a browser-based editor obtain a provider access token through a popup
window without the OAuth client secret ever reaching the browser.
"""

from decap_oauth.core._version import __version__


__all__ = ["__version__"]
