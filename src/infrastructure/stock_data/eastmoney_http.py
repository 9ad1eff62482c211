"""
Shared HTTP plumbing for the EastMoney adapters.

ProviderIdentity holds the fixed client identity (User-Agent and per-host
Referer) sent with every outbound request. It is immutable and injected into
each adapter; the httpx.AsyncClient is created once by the composition root.
"""

from dataclasses import dataclass

import httpx

DEFAULT_TIMEOUT_SECONDS = 10.0


@dataclass(frozen=True)
class ProviderIdentity:
    user_agent: str = (
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
        "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
    )
    quote_referer: str = "https://quote.eastmoney.com/"
    data_referer: str = "https://data.eastmoney.com/"
    fund_referer: str = "https://fund.eastmoney.com/"

    def headers(self, referer: str) -> dict[str, str]:
        return {"User-Agent": self.user_agent, "Referer": referer}


DEFAULT_IDENTITY = ProviderIdentity()


def create_http_client(timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS) -> httpx.AsyncClient:
    """Build the AsyncClient shared by all EastMoney adapters."""
    return httpx.AsyncClient(timeout=httpx.Timeout(timeout_seconds), follow_redirects=True)
