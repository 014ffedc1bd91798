"""Package index fetching from AOSC OS repository mirrors."""

import asyncio
import logging
from concurrent.futures import BrokenExecutor, Executor
from pathlib import Path
from urllib.parse import urljoin

import httpx

from libaosc.constants import DEFAULT_MIRROR, DEFAULT_TIMEOUT, PACKAGES_FILENAME, USER_AGENT
from libaosc.control import parse_packages
from libaosc.decompress import StreamDecoder
from libaosc.errors import ParseControlError, TransportError, WorkerFailure
from libaosc.models import Packages
from libaosc.storage import open_destination, open_destination_async, set_mtime

logger = logging.getLogger(__name__)


def build_packages_url(mirror_url: str, branch: str, architecture: str, compressed: bool = True) -> str:
    """Construct the Packages index URL for a branch + architecture.

    Examples:
        >>> build_packages_url("https://repo.aosc.io/debs", "stable", "amd64")
        'https://repo.aosc.io/debs/dists/stable/main/binary-amd64/Packages.xz'
    """
    mirror_prefix = mirror_url if mirror_url.endswith("/") else f"{mirror_url}/"
    suffix = "Packages.xz" if compressed else "Packages"
    return urljoin(mirror_prefix, f"dists/{branch}/main/binary-{architecture}/{suffix}")


def _transport_error(url: str, exc: Exception) -> TransportError:
    if isinstance(exc, httpx.HTTPStatusError):
        status_code = exc.response.status_code
        msg = f"Failed to download {url}: HTTP {status_code} {exc.response.reason_phrase}"
        if status_code == 404:
            logger.debug(msg)
        else:
            logger.warning(msg)
        return TransportError(msg, url, status_code)

    msg = f"Failed to download {url}: {exc}"
    logger.warning(msg)
    return TransportError(msg, url)


class _BaseFetchPackages:
    def __init__(
        self,
        download_compress: bool,
        download_to: str | Path,
        mirror_url: str | None = None,
        *,
        timeout: float | None = DEFAULT_TIMEOUT,
        user_agent: str = USER_AGENT,
        transport=None,
    ):
        """Configure a fetcher.

        Args:
            download_compress: Request the xz-compressed Packages.xz instead of Packages
            download_to: Directory the raw index is saved into, created if missing
            mirror_url: Base URL of the mirror. Defaults to https://repo.aosc.io/debs
            timeout: Transport timeout in seconds, None for no timeout
            user_agent: User-Agent header sent with the request
            transport: Optional httpx transport handed to each client
        """
        self.download_compress = download_compress
        self.download_to = Path(download_to)
        self.mirror_url = mirror_url or DEFAULT_MIRROR
        self.timeout = timeout
        self.user_agent = user_agent
        self._transport = transport

    @property
    def destination(self) -> Path:
        """Where the raw index is written."""
        return self.download_to / PACKAGES_FILENAME

    def packages_url(self, arch: str, branch: str) -> str:
        return build_packages_url(self.mirror_url, branch, arch, self.download_compress)

    def _client_kwargs(self) -> dict:
        kwargs = {
            "headers": {"User-Agent": self.user_agent},
            "follow_redirects": True,
            "timeout": self.timeout,
        }
        if self._transport is not None:
            kwargs["transport"] = self._transport
        return kwargs


class FetchPackages(_BaseFetchPackages):
    """Blocking Packages index fetcher."""

    def fetch_packages(self, arch: str, branch: str) -> Packages:
        """Download, save and parse the Packages index for arch on branch.

        The raw response body (still compressed, if download_compress is set) is
        written to `download_to/Packages` while it is being decoded.

        Raises:
            TransportError: Connection failure, timeout or non-success HTTP status
            IoError: The index could not be saved
            DecompressionError: The body is not a valid xz stream
            EncodingError: The decoded index is not valid UTF-8
            ControlFormatError: The decoded index is not a valid control file
        """
        url = self.packages_url(arch, branch)
        decoder = StreamDecoder(self.download_compress)
        decoded = bytearray()

        logger.debug(f"Fetching {url}")
        try:
            with httpx.Client(**self._client_kwargs()) as client:
                with client.stream("GET", url) as response:
                    response.raise_for_status()
                    with open_destination(self.destination) as f:
                        for chunk in response.iter_bytes():
                            f.write(chunk)
                            decoded += decoder.feed(chunk)
                    last_modified = response.headers.get("last-modified")
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            raise _transport_error(url, e) from e

        decoder.finish()
        set_mtime(self.destination, last_modified)

        packages = parse_packages(decoded)
        logger.info(f"Fetched {len(packages)} packages from {url} ({decoder.bytes_in} bytes)")
        return packages


class FetchPackagesAsync(_BaseFetchPackages):
    """Asynchronous Packages index fetcher.

    Network reads and file writes suspend the calling task; parsing runs in an
    executor so it does not stall the event loop.
    """

    def __init__(
        self,
        download_compress: bool,
        download_to: str | Path,
        mirror_url: str | None = None,
        *,
        timeout: float | None = DEFAULT_TIMEOUT,
        user_agent: str = USER_AGENT,
        transport=None,
        executor: Executor | None = None,
    ):
        super().__init__(
            download_compress,
            download_to,
            mirror_url,
            timeout=timeout,
            user_agent=user_agent,
            transport=transport,
        )
        # None means the event loop's default executor
        self.executor = executor

    async def fetch_packages(self, arch: str, branch: str) -> Packages:
        """Download, save and parse the Packages index for arch on branch.

        Raises the same errors as FetchPackages.fetch_packages(), plus
        WorkerFailure if the offloaded parse job dies.
        """
        url = self.packages_url(arch, branch)
        decoder = StreamDecoder(self.download_compress)
        decoded = bytearray()

        logger.debug(f"Fetching {url}")
        try:
            async with httpx.AsyncClient(**self._client_kwargs()) as client:
                async with client.stream("GET", url) as response:
                    response.raise_for_status()
                    async with open_destination_async(self.destination) as f:
                        async for chunk in response.aiter_bytes():
                            await f.write(chunk)
                            decoded += decoder.feed(chunk)
                    last_modified = response.headers.get("last-modified")
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            raise _transport_error(url, e) from e

        decoder.finish()
        set_mtime(self.destination, last_modified)

        packages = await self._parse_in_worker(bytes(decoded))
        logger.info(f"Fetched {len(packages)} packages from {url} ({decoder.bytes_in} bytes)")
        return packages

    async def _parse_in_worker(self, data: bytes) -> Packages:
        loop = asyncio.get_running_loop()
        try:
            return await loop.run_in_executor(self.executor, parse_packages, data)
        except ParseControlError:
            raise
        except BrokenExecutor as e:
            raise WorkerFailure(f"Package parser worker died: {e}") from e
        except Exception as e:
            raise WorkerFailure(f"Package parser worker failed: {e!r}") from e
