"""HTTP client and Proxy Channel for pagetomark."""

from .client import AsyncHttpClient
from .protocols import HttpClient, HttpResponse
from .proxy import ProxyChannel, ProxyMode

__all__ = [
    "AsyncHttpClient",
    "HttpClient",
    "HttpResponse",
    "ProxyChannel",
    "ProxyMode",
]
