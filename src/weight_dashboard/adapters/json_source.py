"""JSON snapshot and meal file sources."""

import asyncio
import json
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol

import httpx


class JsonSource(Protocol):
    """Interface for a JSON document loaded on demand."""

    async def load(self) -> object:
        """Return the decoded JSON document."""


@dataclass
class FileJsonSource(JsonSource):
    """JSON document read from the local filesystem."""

    path: Path

    async def load(self) -> object:
        """Read and decode the file off the event loop."""
        return await asyncio.to_thread(read_json_file, self.path)


@dataclass
class HttpxJsonSource(JsonSource):
    """JSON document served as a static asset."""

    url: str
    http_client: httpx.AsyncClient
    timeout: float = 15

    async def load(self) -> object:
        """Fetch and decode the document."""
        response = await self.http_client.get(self.url, timeout=self.timeout)
        response.raise_for_status()
        return response.json()


def read_json_file(path: Path) -> object:
    """Decode a UTF-8 JSON file."""
    with path.open(encoding="utf-8") as handle:
        return json.load(handle)


def json_source_for(
    location: str, http_client: httpx.AsyncClient, timeout: float = 15
) -> JsonSource:
    """Pick an HTTP or file source depending on the location."""
    if location.startswith(("http://", "https://")):
        return HttpxJsonSource(url=location, http_client=http_client, timeout=timeout)
    return FileJsonSource(path=Path(location))
