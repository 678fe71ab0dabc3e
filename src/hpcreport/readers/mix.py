"""
mix.py - Reader for HPC module metadata (``.mix``) files.

A mix file is a single ``show``-ed value::

    Mix "src/Main.hs" 2024-03-01 10:00:00.5 UTC 1234567 8
        [(10:1-10:20,TopLevelBox ["main"]),(11:7-11:12,BinBox GuardBinBox True), ...]

The fields are the source path as the compiler saw it, the modification time
of the source, the instrumentation hash, the tab stop width, and one
``(position, label)`` pair per region. The pairs are in the same order as the
module's ticks in the tix file.
"""

from pathlib import Path
from typing import Optional, Union

from hpcreport import logger
from hpcreport.core.models import BoxLabel, CondKind, MixEntry, MixFile, Position, RegionKind
from hpcreport.readers.haskell import IDENT, POSITION, PUNCT, TIMESTAMP, Scanner, read_input
from hpcreport.utils.paths import FileSystemProvider

COND_BOXES = {
    "GuardBinBox": CondKind.GUARD,
    "CondBinBox": CondKind.CONDITION,
    "QualBinBox": CondKind.QUALIFIER,
}


def _position(scanner: Scanner) -> Position:
    token = scanner.expect(POSITION)
    start, end = token.value.split("-")
    start_line, start_col = (int(n) for n in start.split(":"))
    end_line, end_col = (int(n) for n in end.split(":"))
    if (end_line, end_col) < (start_line, start_col):
        raise scanner.error(f"position {token.value} ends before it starts", token)
    if start_line < 1:
        raise scanner.error(f"position {token.value} has no line", token)
    return Position(start_line, start_col, end_line, end_col)


def _box_label(scanner: Scanner) -> BoxLabel:
    token = scanner.expect(IDENT)
    box = token.value
    if box == "ExpBox":
        alternative = scanner.boolean()
        return BoxLabel(RegionKind.ALTERNATIVE if alternative else RegionKind.EXPRESSION)
    if box == "TopLevelBox":
        return BoxLabel(RegionKind.TOP_LEVEL, tuple(scanner.list_of(scanner.string)))
    if box == "LocalBox":
        return BoxLabel(RegionKind.LOCAL, tuple(scanner.list_of(scanner.string)))
    if box == "BinBox":
        cond_token = scanner.expect(IDENT)
        cond = COND_BOXES.get(cond_token.value)
        if cond is None:
            raise scanner.error(f"unknown condition box {cond_token.value!r}", cond_token)
        kind = RegionKind.BOOL_TRUE if scanner.boolean() else RegionKind.BOOL_FALSE
        return BoxLabel(kind, cond=cond)
    raise scanner.error(f"unknown box label {box!r}", token)


def _entry(scanner: Scanner) -> MixEntry:
    scanner.expect(PUNCT, "(")
    position = _position(scanner)
    scanner.expect(PUNCT, ",")
    label = _box_label(scanner)
    scanner.expect(PUNCT, ")")
    return MixEntry(position=position, label=label)


def parse_mix(data: Union[bytes, str], source: str = "<mix>") -> MixFile:
    """
    Parse the contents of a mix file.

    Raises:
        TraceParseError: On any malformed input
    """
    scanner = Scanner(data, source)
    scanner.expect(IDENT, "Mix")
    source_path = scanner.string()
    timestamp = scanner.expect(TIMESTAMP).value
    mix_hash = scanner.natural("module hash")
    tabstop = scanner.natural("tab stop")
    entries = scanner.list_of(lambda: _entry(scanner))
    scanner.expect_end()
    logger.debug(f"Parsed {len(entries)} region(s) for {source_path} from {source}")
    return MixFile(
        source_path=source_path,
        timestamp=timestamp,
        hash=mix_hash,
        tabstop=tabstop,
        entries=tuple(entries),
    )


def read_mix(path: Union[str, Path], fs_provider: Optional[FileSystemProvider] = None) -> MixFile:
    """Read and parse a mix file."""
    return parse_mix(read_input(path, fs_provider), source=str(path))


__all__ = ["COND_BOXES", "parse_mix", "read_mix"]
