"""Shared outbound HTTP helpers."""

import httpx

from ..errors import TransportError


async def post_json(
    client: httpx.AsyncClient,
    url: str,
    payload: dict,
    timeout: float | None = None,
) -> httpx.Response:
    """POST a JSON body and require a 2xx answer."""
    try:
        response = await client.post(url, json=payload, timeout=timeout)
    except httpx.HTTPError as e:
        raise TransportError(f"POST {url} failed: {e}") from e

    if not response.is_success:
        raise TransportError(
            f"POST {url} returned status: {response.status_code}"
        )
    return response
