"""
tix.py - Reader for HPC tick-count (``.tix``) files.

A tix file is a single ``show``-ed value::

    Tix [TixModule "Main" 1234567 3 [3,0,5], TixModule "pkg-0.1/Foo" 42 2 [0,1]]

Each ``TixModule`` holds the module name, the hash of its instrumentation,
the number of ticks and the ticks themselves, one per region in mix order.
"""

from pathlib import Path
from typing import Optional, Union

from hpcreport import logger
from hpcreport.core.models import Tix, TixModule
from hpcreport.readers.haskell import IDENT, Scanner, read_input
from hpcreport.utils.paths import FileSystemProvider


def _tix_module(scanner: Scanner) -> TixModule:
    start = scanner.expect(IDENT, "TixModule")
    name = scanner.string()
    module_hash = scanner.natural("module hash")
    count = scanner.natural("tick count")
    ticks = tuple(scanner.list_of(lambda: scanner.natural("tick")))
    if count != len(ticks):
        raise scanner.error(
            f"module {name!r} declares {count} ticks but lists {len(ticks)}", start
        )
    return TixModule(name=name, hash=module_hash, ticks=ticks)


def parse_tix(data: Union[bytes, str], source: str = "<tix>") -> Tix:
    """
    Parse the contents of a tix file.

    Args:
        data: Raw file contents
        source: Name used in error messages

    Returns:
        The modules, in file order

    Raises:
        TraceParseError: On any malformed input
    """
    scanner = Scanner(data, source)
    scanner.expect(IDENT, "Tix")
    modules = scanner.list_of(lambda: _tix_module(scanner))
    scanner.expect_end()
    logger.debug(f"Parsed {len(modules)} module(s) from {source}")
    return Tix(modules=tuple(modules))


def read_tix(path: Union[str, Path], fs_provider: Optional[FileSystemProvider] = None) -> Tix:
    """Read and parse a tix file."""
    return parse_tix(read_input(path, fs_provider), source=str(path))


__all__ = ["parse_tix", "read_tix"]
