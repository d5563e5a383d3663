from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Any

import httpx


def parse_body(response: httpx.Response) -> Any:
    """
    Parse a gateway response body as a generic document.

    JSON bodies become dicts/lists, anything else stays text. An empty
    body is returned as None.
    """
    text = response.text
    if not text.strip():
        return None
    try:
        return response.json()
    except ValueError:
        return text


@asynccontextmanager
async def client_scope(
    client: httpx.AsyncClient | None,
    timeout: float,
) -> AsyncIterator[httpx.AsyncClient]:
    """Yield the injected client, or a short-lived one closed on exit."""
    if client is not None:
        yield client
        return
    async with httpx.AsyncClient(timeout=timeout) as owned:
        yield owned
