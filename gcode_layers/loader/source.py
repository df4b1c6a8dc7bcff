"""G-code source loader -- fetch text, then hand it to the parser.

Sources are addressed like URLs.  ``http://`` and ``https://`` go through
``requests``; anything else is a local path.  A base path set with
``set_path`` is prefixed to every relative source.

The loader is the only place that does I/O.  Parsing never starts on a
partial document: the whole body is fetched first.

Usage::

    loader = GCodeLoader().set_path("https://printer.local/files/")
    loader.set_request_header({"X-Api-Key": key}).set_with_credentials(True)
    result = loader.load("benchy.gcode")
    print(len(result.layers), result.layer_indices[:5])
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Callable, Optional
from urllib.parse import urljoin, urlparse

import requests

from gcode_layers.configs.schema import LoaderConfig
from gcode_layers.interpreter.parser import GCodeParser, ParseResult
from gcode_layers.utils import fs

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[int, Optional[int]], None]

_CHUNK_SIZE = 64 * 1024


class LoadError(Exception):
    """Raised when the G-code source cannot be obtained."""

    def __init__(self, source: str, reason: str) -> None:
        super().__init__(f"Failed to load {source}: {reason}")
        self.source = source
        self.reason = reason


def _is_http(source: str) -> bool:
    return urlparse(source).scheme in ("http", "https")


class GCodeLoader:
    """Fetch G-code text from a URL or file and parse it.

    Parameters
    ----------
    parser : GCodeParser | None
        Parser to use; a default one when ``None``.
    timeout_s : float
        HTTP timeout in seconds.
    encoding : str
        Text encoding of the source.
    """

    def __init__(
        self,
        parser: GCodeParser | None = None,
        timeout_s: float = 30.0,
        encoding: str = "utf-8",
    ) -> None:
        self.parser = parser if parser is not None else GCodeParser()
        self.timeout_s = timeout_s
        self.encoding = encoding
        self.path: str = ""
        self.request_header: dict[str, str] = {}
        self.with_credentials: bool = False
        self._session: requests.Session | None = None

    @classmethod
    def from_config(
        cls, config: LoaderConfig, parser: GCodeParser | None = None
    ) -> GCodeLoader:
        """Build a loader from the ``loader`` config section."""
        loader = cls(parser=parser, timeout_s=config.timeout_s, encoding=config.encoding)
        loader.set_path(config.base_path)
        loader.set_request_header(config.request_headers)
        loader.set_with_credentials(config.with_credentials)
        return loader

    # ------------------------------------------------------------------
    # Chainable setters
    # ------------------------------------------------------------------

    def set_path(self, value: str) -> GCodeLoader:
        self.path = value or ""
        return self

    def set_request_header(self, request_header: dict[str, str]) -> GCodeLoader:
        self.request_header = dict(request_header or {})
        return self

    def set_with_credentials(self, with_credentials: bool) -> GCodeLoader:
        self.with_credentials = bool(with_credentials)
        return self

    # ------------------------------------------------------------------
    # Fetching
    # ------------------------------------------------------------------

    def resolve(self, source: str) -> str:
        """Join *source* onto the base path.

        Absolute URLs and absolute file paths are returned unchanged.
        """
        if not self.path or _is_http(source):
            return source
        if _is_http(self.path):
            base = self.path if self.path.endswith("/") else self.path + "/"
            return urljoin(base, source)
        if Path(source).is_absolute():
            return source
        return str(Path(self.path) / source)

    def fetch(self, source: str, on_progress: ProgressCallback | None = None) -> str:
        """Return the full text of *source*.

        Raises
        ------
        LoadError
            If the file is missing or the HTTP request fails.
        """
        target = self.resolve(source)
        logger.info(f"Fetching G-code from {target}")

        if _is_http(target):
            return self._fetch_http(target, on_progress)

        try:
            return fs.read_text(target, encoding=self.encoding, on_progress=on_progress)
        except (OSError, LookupError) as e:
            raise LoadError(target, str(e)) from e

    def _http(self) -> requests.Session | None:
        if not self.with_credentials:
            return None
        if self._session is None:
            self._session = requests.Session()
        return self._session

    def _fetch_http(self, url: str, on_progress: ProgressCallback | None) -> str:
        session = self._http()
        get = session.get if session is not None else requests.get
        chunks: list[bytes] = []
        received = 0
        try:
            with get(
                url,
                headers=self.request_header,
                timeout=self.timeout_s,
                stream=True,
            ) as response:
                response.raise_for_status()

                total_header = response.headers.get("Content-Length")
                total = int(total_header) if total_header and total_header.isdigit() else None

                for chunk in response.iter_content(chunk_size=_CHUNK_SIZE):
                    if not chunk:
                        continue
                    chunks.append(chunk)
                    received += len(chunk)
                    if on_progress is not None:
                        on_progress(received, total)

            logger.debug(f"Received {received} bytes from {url}")
            return b"".join(chunks).decode(self.encoding, errors="replace")
        except (requests.RequestException, LookupError) as e:
            raise LoadError(url, str(e)) from e

    # ------------------------------------------------------------------
    # Fetch + parse
    # ------------------------------------------------------------------

    def load(
        self,
        source: str,
        on_load: Callable[[ParseResult], None] | None = None,
        on_progress: ProgressCallback | None = None,
        on_error: Callable[[LoadError], None] | None = None,
    ) -> ParseResult | None:
        """Fetch *source* and parse it.

        Parameters
        ----------
        source : str
            URL or path, joined onto the base path.
        on_load : callable, optional
            Receives the ``ParseResult``.
        on_progress : callable, optional
            Receives ``(bytes_received, total_bytes_or_None)``.
        on_error : callable, optional
            Receives the ``LoadError``.  When given, fetch errors are not
            raised and ``None`` is returned.

        Returns
        -------
        ParseResult | None
            Parsed layers, or ``None`` if the fetch failed and *on_error*
            handled it.
        """
        try:
            text = self.fetch(source, on_progress=on_progress)
        except LoadError as e:
            if on_error is None:
                raise
            logger.error(str(e))
            on_error(e)
            return None

        result = self.parser.parse(text)
        if on_load is not None:
            on_load(result)
        return result

    def close(self) -> None:
        if self._session is not None:
            self._session.close()
            self._session = None

    def __enter__(self) -> GCodeLoader:
        return self

    def __exit__(self, *exc) -> None:
        self.close()
