# wloc/transport/config.py

import os
from dataclasses import dataclass

from wloc.protocol.envelope import DEFAULT_CLIENT_ID, DEFAULT_CLIENT_VERSION, DEFAULT_LOCALE

@dataclass
class ServiceConfig:
    """
    Settings for talking to the upstream location service.

    Attributes
    ----------
    endpoint
        URL the binary envelope is POSTed to.
    user_agent
        User-Agent header; the service expects a locationd client.
    locale
        Locale tag written into the envelope.
    client_id
        Client identifier written into the envelope.
    client_version
        Client version written into the envelope.
    timeout_s
        Per-request timeout (s) applied to each upstream POST.
    """
    endpoint:       str   = "https://gs-loc.apple.com/clls/wloc"
    user_agent:     str   = "locationd/1753.17 CFNetwork/889.9 Darwin/17.2.0"
    locale:         str   = DEFAULT_LOCALE
    client_id:      str   = DEFAULT_CLIENT_ID
    client_version: str   = DEFAULT_CLIENT_VERSION
    timeout_s:      float = 10.0

    @classmethod
    def from_env(cls):
        """Defaults overridden by WLOC_ENDPOINT, WLOC_USER_AGENT and WLOC_TIMEOUT."""
        cfg = cls()
        cfg.endpoint = os.environ.get("WLOC_ENDPOINT", cfg.endpoint)
        cfg.user_agent = os.environ.get("WLOC_USER_AGENT", cfg.user_agent)
        timeout = os.environ.get("WLOC_TIMEOUT")
        if timeout:
            cfg.timeout_s = float(timeout)
        return cfg
