"""Bridge to the native (compiled) HTML to Markdown renderer.

The native renderer is a shared library exporting

    char *ConvertHTMLToMarkdown(char *html);

It is loaded with ctypes the first time it is needed and kept for the rest of
the process.
"""

from __future__ import annotations

import asyncio
import ctypes
import logging
import threading
from pathlib import Path
from typing import Callable, Optional

from ..concurrency import ConcurrencyManager
from ..errors import ComponentUnavailable, NativeConversionError
from ..models.config import ConversionConfig
from .images import normalize_lazy_images

logger = logging.getLogger(__name__)

NATIVE_SYMBOL = "ConvertHTMLToMarkdown"

NativeConvertFn = Callable[[bytes], Optional[bytes]]


class NativeLibraryLoader:
    """
    Loads the native library once and hands out its conversion function.

    The library file is checked before every load attempt, so a library
    installed after startup is picked up by the next call. Failed attempts are
    not remembered; only a successful load is.

    Example:
        loader = NativeLibraryLoader(Path("sharedLibs/go-html-to-md/html-to-markdown.so"))
        convert = loader.load()
        markdown = convert(b"<p>hi</p>")
    """

    def __init__(self, library_path: Path, symbol: str = NATIVE_SYMBOL):
        self._library_path = Path(library_path)
        self._symbol = symbol
        self._lock = threading.Lock()
        self._convert: Optional[NativeConvertFn] = None

    @property
    def library_path(self) -> Path:
        return self._library_path

    @property
    def loaded(self) -> bool:
        return self._convert is not None

    def load(self) -> NativeConvertFn:
        """
        Return the native conversion function, loading the library on first use.

        Raises:
            ComponentUnavailable: If the library file does not exist
            NativeConversionError: If the file exists but cannot be loaded
        """
        convert = self._convert
        if convert is not None:
            return convert

        with self._lock:
            if self._convert is None:
                if not self._library_path.is_file():
                    raise ComponentUnavailable(self._library_path)
                self._convert = self._open()
            return self._convert

    def _open(self) -> NativeConvertFn:
        try:
            library = ctypes.CDLL(str(self._library_path))
            convert = getattr(library, self._symbol)
        except (OSError, AttributeError) as e:
            raise NativeConversionError(
                f"Failed to load native renderer from {self._library_path}: {e}",
                cause=e,
            ) from e

        convert.argtypes = [ctypes.c_char_p]
        convert.restype = ctypes.c_char_p
        logger.info(f"Loaded native renderer from {self._library_path}")
        return convert  # type: ignore[no-any-return]


_loaders: dict[Path, NativeLibraryLoader] = {}
_loaders_lock = threading.Lock()


def get_loader(library_path: Path) -> NativeLibraryLoader:
    """Return the process-wide loader for a library path."""
    key = Path(library_path).absolute()
    with _loaders_lock:
        loader = _loaders.get(key)
        if loader is None:
            loader = NativeLibraryLoader(key)
            _loaders[key] = loader
        return loader


_default_concurrency = ConcurrencyManager(max_workers=4)


class NativeRenderer:
    """
    Async front end for the native renderer.

    Resolves lazy-loaded images first (the same resolution the fallback
    renderer applies), then runs the blocking native call on a worker thread
    so the event loop keeps serving other conversions.

    Example:
        renderer = NativeRenderer.from_config(config)
        markdown = await renderer.convert(html)
    """

    def __init__(
        self,
        loader: NativeLibraryLoader,
        timeout: float = 30.0,
        concurrency: Optional[ConcurrencyManager] = None,
    ):
        """
        Initialize the native renderer.

        Args:
            loader: Loader for the shared library
            timeout: Seconds to wait for a conversion
            concurrency: Thread pool for the blocking call (shared default if None)
        """
        self._loader = loader
        self._timeout = timeout
        self._concurrency = concurrency or _default_concurrency

    @classmethod
    def from_config(cls, config: ConversionConfig) -> NativeRenderer:
        return cls(get_loader(config.resolved_library_path), timeout=config.native_timeout)

    @property
    def library_path(self) -> Path:
        return self._loader.library_path

    async def convert(self, html: str) -> str:
        """
        Convert HTML to Markdown with the native library.

        Raises:
            ComponentUnavailable: If the library is not installed
            NativeConversionError: On load failure, timeout or conversion error
        """
        convert = self._loader.load()
        prepared = normalize_lazy_images(html)

        try:
            result = await self._concurrency.run_blocking(
                convert,
                prepared.encode("utf-8"),
                timeout=self._timeout,
            )
        except asyncio.TimeoutError as e:
            raise NativeConversionError(
                f"Native renderer timed out after {self._timeout}s",
                cause=e,
            ) from e
        except Exception as e:
            raise NativeConversionError(f"Native renderer failed: {e}", cause=e) from e

        if result is None:
            raise NativeConversionError("Native renderer returned no output")

        return result.decode("utf-8", errors="replace")
