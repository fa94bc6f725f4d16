"""
Transport configuration for the file service client.

Each object maps onto one aiohttp knob: the connector (pool limits, TLS),
the session timeout, and the per-request proxy arguments.
"""
from dataclasses import dataclass, field
from typing import Optional, Dict, Any, Union
import logging
import ssl

import aiohttp

from ..exceptions import InvalidArgumentError


@dataclass
class ProxyConfig:
    """
    Outbound HTTP(S) proxy.

    Credentials travel as aiohttp `proxy_auth`, never inside the URL, so
    they may contain any character.
    """
    url: str
    username: Optional[str] = None
    password: Optional[str] = None

    def __post_init__(self):
        if not self.url or '://' not in self.url:
            raise InvalidArgumentError('proxy', f"expected an absolute URL, got {self.url!r}")

    def request_kwargs(self) -> Dict[str, Any]:
        """Keyword arguments for ClientSession.request."""
        kwargs: Dict[str, Any] = {'proxy': self.url}
        if self.username is not None:
            kwargs['proxy_auth'] = aiohttp.BasicAuth(self.username, self.password or '')
        return kwargs


@dataclass
class SSLConfig:
    """
    TLS settings for the connector.

    With no CA bundle and no client certificate the connector keeps
    aiohttp's default verification.
    """
    verify: bool = True
    ca_file: Optional[str] = None
    client_cert: Optional[str] = None
    client_key: Optional[str] = None

    def connector_ssl(self) -> Union[ssl.SSLContext, bool]:
        """Value for TCPConnector(ssl=...)."""
        if not self.verify:
            return False
        if not self.ca_file and not self.client_cert:
            return True

        context = ssl.create_default_context(cafile=self.ca_file)
        if self.client_cert:
            context.load_cert_chain(self.client_cert, keyfile=self.client_key)
        return context


@dataclass
class TimeoutConfig:
    """
    Timeouts in seconds.

    Probes and session requests are small; part uploads carry a whole chunk
    and get their own, longer budget.
    """
    connect: float = 30.0
    request: float = 60.0
    part_upload: float = 600.0

    def __post_init__(self):
        for name in ('connect', 'request', 'part_upload'):
            if getattr(self, name) <= 0:
                raise InvalidArgumentError(name, 'timeout must be positive')

    def session_timeout(self) -> aiohttp.ClientTimeout:
        """Default timeout of the owned ClientSession."""
        return aiohttp.ClientTimeout(total=self.request, sock_connect=self.connect)

    def part_upload_timeout(self) -> aiohttp.ClientTimeout:
        """Per-request timeout for a part upload."""
        return aiohttp.ClientTimeout(total=self.part_upload, sock_connect=self.connect)


@dataclass
class APIConfig:
    """Complete transport configuration for FileServiceClient."""
    user_agent: str = 'fileservice-client/1.0.0'

    proxy: Optional[ProxyConfig] = None
    ssl: SSLConfig = field(default_factory=SSLConfig)
    timeout: TimeoutConfig = field(default_factory=TimeoutConfig)

    # Sent with every request; cannot replace Accept or Authorization
    extra_headers: Dict[str, str] = field(default_factory=dict)

    # Level of the transport logger while the application has no handlers
    log_level: int = logging.INFO

    limit_per_host: int = 10
    limit: int = 100

    @classmethod
    def default(cls) -> 'APIConfig':
        """Create default configuration."""
        return cls()

    def get_connector_kwargs(self) -> Dict[str, Any]:
        """Get kwargs for aiohttp TCPConnector."""
        return {
            'limit': self.limit,
            'limit_per_host': self.limit_per_host,
            'ssl': self.ssl.connector_ssl(),
        }

    def get_session_kwargs(self) -> Dict[str, Any]:
        """Get kwargs for aiohttp ClientSession."""
        return {
            'timeout': self.timeout.session_timeout(),
        }

    def get_request_kwargs(self) -> Dict[str, Any]:
        """Get per-request kwargs (proxy and proxy credentials)."""
        return self.proxy.request_kwargs() if self.proxy else {}
