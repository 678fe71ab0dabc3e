"""
Shared test utilities for hpcreport.

Provides:
- ``tix_text``/``mix_text``: render tix and mix files in HPC's ``show`` syntax
- ``MemoryFilesystemProvider``: in-memory ``FileSystemProvider`` for resolver tests
- ``HpcProject``: builds a realistic tix/mix/source tree under a temporary directory
- hypothesis strategies for positions, labels and tick arrays
"""

from dataclasses import dataclass, field
from pathlib import Path, PurePosixPath
from typing import Dict, List, Optional, Sequence, Tuple, Union

from hypothesis import strategies as st

from hpcreport.core.models import BoxLabel, CondKind, MixEntry, Position, RegionKind

DEFAULT_TIMESTAMP = "2024-03-01 10:00:00.123456 UTC"

# (position, label) as written in a mix file, e.g. ("10:1-10:20", 'TopLevelBox ["main"]')
RawEntry = Tuple[str, str]


def haskell_string(value: str) -> str:
    return '"' + value.replace("\\", "\\\\").replace('"', '\\"') + '"'


def tix_text(modules: Sequence[Tuple[str, int, Sequence[int]]]) -> str:
    """Render ``Tix [...]`` from (name, hash, ticks) triples."""
    body = ",".join(
        f"TixModule {haskell_string(name)} {module_hash} {len(ticks)} [{','.join(str(t) for t in ticks)}]"
        for name, module_hash, ticks in modules
    )
    return f"Tix [{body}]"


def mix_text(
    source: str,
    module_hash: int,
    entries: Sequence[RawEntry],
    timestamp: str = DEFAULT_TIMESTAMP,
    tabstop: int = 8,
) -> str:
    body = ",".join(f"({pos},{label})" for pos, label in entries)
    return f"Mix {haskell_string(source)} {timestamp} {module_hash} {tabstop} [{body}]"


class MemoryFilesystemProvider:
    """``FileSystemProvider`` over a dictionary of POSIX paths to bytes."""

    def __init__(self, files: Optional[Dict[str, Union[str, bytes]]] = None, cwd: str = "/work"):
        self.cwd = PurePosixPath(cwd)
        self.files: Dict[str, bytes] = {}
        self.checked: List[str] = []
        for path, content in (files or {}).items():
            self.add_file(path, content)

    def _absolute(self, path: Union[str, Path]) -> PurePosixPath:
        p = PurePosixPath(str(path).replace("\\", "/"))
        if not p.is_absolute():
            p = self.cwd / p
        parts: List[str] = []
        for part in p.parts[1:]:
            if part == "..":
                if parts:
                    parts.pop()
            elif part != ".":
                parts.append(part)
        return PurePosixPath("/", *parts)

    def add_file(self, path: str, content: Union[str, bytes] = b"") -> None:
        data = content.encode("utf-8") if isinstance(content, str) else content
        self.files[str(self._absolute(path))] = data

    def resolve_path(self, path: Path) -> Path:
        return Path(str(self._absolute(path)))

    def make_relative(self, path: Path, base: Path) -> Path:
        return Path(str(PurePosixPath(str(path)).relative_to(PurePosixPath(str(base)))))

    def check_file_exists(self, path: Path) -> bool:
        self.checked.append(str(path))
        return str(self._absolute(path)) in self.files

    def read_bytes(self, path: Path) -> bytes:
        try:
            return self.files[str(self._absolute(path))]
        except KeyError:
            raise FileNotFoundError(str(path)) from None


@dataclass
class HpcProject:
    """
    A tix/mix/source tree on disk.

    Layout under ``root``::

        src/<module>.hs          sources
        .hpc/<module>.mix        mix files
        <name>.tix               one tix file per target
    """

    root: Path
    mix_dir: str = ".hpc"
    modules: Dict[str, Tuple[int, List[RawEntry], str]] = field(default_factory=dict)

    def add_module(
        self,
        name: str,
        entries: Sequence[RawEntry],
        source: Optional[str] = None,
        module_hash: int = 1000,
        source_lines: int = 40,
        write_source: bool = True,
    ) -> str:
        source = source or f"src/{name.replace('.', '/')}.hs"
        self.modules[name] = (module_hash, list(entries), source)
        mix_path = self.root / self.mix_dir / f"{name}.mix"
        mix_path.parent.mkdir(parents=True, exist_ok=True)
        mix_path.write_text(mix_text(source, module_hash, entries), encoding="utf-8")
        if write_source:
            src_path = self.root / source
            src_path.parent.mkdir(parents=True, exist_ok=True)
            src_path.write_text("\n".join(f"-- line {i}" for i in range(1, source_lines + 1)) + "\n")
        return source

    def write_tix(self, name: str, ticks: Dict[str, Sequence[int]]) -> Path:
        modules = [(module, self.modules[module][0], counts) for module, counts in ticks.items()]
        path = self.root / f"{name}.tix"
        path.write_text(tix_text(modules), encoding="utf-8")
        return path


def record_entries(kinds: Sequence[RegionKind], position: Position) -> List[MixEntry]:
    labels = {
        RegionKind.TOP_LEVEL: BoxLabel(RegionKind.TOP_LEVEL, ("f",)),
        RegionKind.LOCAL: BoxLabel(RegionKind.LOCAL, ("f", "go")),
        RegionKind.ALTERNATIVE: BoxLabel(RegionKind.ALTERNATIVE),
        RegionKind.EXPRESSION: BoxLabel(RegionKind.EXPRESSION),
        RegionKind.BOOL_TRUE: BoxLabel(RegionKind.BOOL_TRUE, cond=CondKind.GUARD),
        RegionKind.BOOL_FALSE: BoxLabel(RegionKind.BOOL_FALSE, cond=CondKind.GUARD),
    }
    return [MixEntry(position, labels[kind]) for kind in kinds]


# ============================================================================
# HYPOTHESIS STRATEGIES
# ============================================================================

@st.composite
def positions(draw, max_line: int = 60) -> Position:
    start_line = draw(st.integers(min_value=1, max_value=max_line))
    end_line = draw(st.integers(min_value=start_line, max_value=start_line + 4))
    start_col = draw(st.integers(min_value=1, max_value=80))
    end_col = draw(st.integers(min_value=start_col if end_line == start_line else 1, max_value=120))
    return Position(start_line, start_col, end_line, end_col)


box_labels = st.one_of(
    st.builds(BoxLabel, st.sampled_from([RegionKind.TOP_LEVEL, RegionKind.LOCAL]),
              st.tuples(st.sampled_from(["main", "go", "helper"]))),
    st.builds(BoxLabel, st.sampled_from([RegionKind.ALTERNATIVE, RegionKind.EXPRESSION])),
    st.builds(BoxLabel, st.sampled_from([RegionKind.BOOL_TRUE, RegionKind.BOOL_FALSE]),
              st.just(()), st.sampled_from(list(CondKind))),
)

mix_entries = st.builds(MixEntry, positions(), box_labels)

tick_counts = st.integers(min_value=0, max_value=10_000)
