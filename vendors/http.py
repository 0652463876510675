from __future__ import annotations

from typing import Any, Iterator

import httpx


def get_http_client() -> Iterator[httpx.Client]:
    """One outbound client per request; closed once the response is sent."""
    with httpx.Client() as client:
        yield client


def best_effort_json(response: httpx.Response) -> Any:
    try:
        return response.json()
    except ValueError:
        return {"message": response.text[:200]} if response.text else {}
