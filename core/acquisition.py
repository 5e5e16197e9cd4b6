import asyncio
import httpx
import json
import logging
from collections.abc import Callable
from config import FETCH_TIMEOUT_SECONDS
from core.errors import AcquisitionFailure, MalformedJsonFailure
from pathlib import Path

logger = logging.getLogger(__name__)


def _noop(*args):
    pass


class DocumentReader:
    """Read and parse the JSON documents named by a request source, one at a time"""

    def __init__(
        self,
        http_client: httpx.AsyncClient | None = None,
        progress: Callable[[str], None] = _noop,
        on_read: Callable[[], None] = _noop,
        on_parse: Callable[[], None] = _noop,
    ):
        self.http_client = http_client
        self.progress = progress
        # Phase hooks, called before each source is read and before it is parsed
        self.on_read = on_read
        self.on_parse = on_parse

    async def parse(self, text: str, label: str):
        """Parse a JSON payload off the event loop"""
        self.on_parse()
        try:
            return await asyncio.to_thread(json.loads, text)
        except json.JSONDecodeError as e:
            logger.error(f"Invalid JSON in {label}: {e}")
            raise MalformedJsonFailure(str(e)) from e

    async def fetch_text(self, url: str) -> str:
        """Download a document body, raising AcquisitionFailure on transport errors or non-2xx status"""
        client = self.http_client or httpx.AsyncClient(timeout=FETCH_TIMEOUT_SECONDS, follow_redirects=True)
        try:
            response = await client.get(url)
            if not response.is_success:
                raise AcquisitionFailure(f"Fetch failed: {response.status_code}")
            self.progress("Reading file...")
            return response.text
        except httpx.HTTPError as e:
            raise AcquisitionFailure(f"Fetch failed: {e}") from e
        finally:
            if self.http_client is None:
                await client.aclose()

    async def read_url(self, url: str) -> list:
        self.on_read()
        self.progress("Fetching file...")
        logger.info(f"Fetching {url}")
        text = await self.fetch_text(url)
        self.progress("Parsing JSON...")
        return [await self.parse(text, url)]

    async def read_file_text(self, source) -> str:
        """Read a path or a blob-like object exposing read_text()"""
        try:
            if isinstance(source, (str, Path)):
                return await asyncio.to_thread(Path(source).read_text, encoding='utf-8')
            return await asyncio.to_thread(source.read_text)
        except OSError as e:
            raise AcquisitionFailure(f"Could not read {source}: {e.strerror or e}") from e

    async def read_files(self, files: list) -> list:
        documents = []
        total = len(files)
        for i, source in enumerate(files, start=1):
            self.on_read()
            self.progress(f"Reading file {i}/{total}...")
            text = await self.read_file_text(source)
            self.progress(f"Parsing file {i}/{total}...")
            documents.append(await self.parse(text, str(source)))
            logger.debug(f"Parsed {source} ({len(text)} characters)")
        return documents

    async def read(self, source: dict | None) -> list:
        """
        Resolve a request source to parsed documents

        Args:
            source: {'url': str} or {'files': [path or blob-like, ...]}

        Returns:
            list: parsed JSON documents in request order (empty when no files are given)
        """
        source = source or {}
        if source.get('url'):
            return await self.read_url(source['url'])
        return await self.read_files(source.get('files') or [])
