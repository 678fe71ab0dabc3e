"""
pipeline.py - Complete conversion from tix/mix files to a coverage report.

For every target: read its tix file, locate and read the mix file of each
module, correlate ticks with regions and fold the records into a partial
aggregate for that target. The partials are merged in a single reduction so
that the report does not depend on target order. Nothing is written until
every target has been processed; any error aborts the whole conversion.
"""

import sys
from pathlib import Path
from typing import Any, Dict, Iterable, Optional, Sequence, Union

from hpcreport import configure_logging, logger
from hpcreport.config.models import ConversionConfig
from hpcreport.config.yaml_config import load_config
from hpcreport.core.aggregate import Aggregator, merge_all
from hpcreport.core.correlate import correlate_module
from hpcreport.core.models import Aggregate, Target
from hpcreport.discovery.resolver import find_mix, find_tix
from hpcreport.discovery.targets import resolve_targets
from hpcreport.exceptions import (
    FileAccessError,
    NoTargetError,
    log_and_raise,
    with_brief_usage_on_error,
)
from hpcreport.readers.mix import read_mix
from hpcreport.readers.tix import read_tix
from hpcreport.reporting import get_renderer
from hpcreport.utils.paths import FileSystemProvider

PathLike = Union[str, Path]


def aggregate_target(
    target: Target,
    *,
    exclude_modules: Iterable[str] = (),
    root: Optional[PathLike] = None,
    check_hash: bool = True,
    fs_provider: Optional[FileSystemProvider] = None,
) -> Aggregate:
    """
    Build the aggregate of a single target.

    Raises:
        TixNotFoundError, MixNotFoundError, SrcNotFoundError: On missing inputs
        TraceParseError, LengthMismatchError, HashMismatchError: On bad inputs
    """
    excluded = set(exclude_modules)
    tix = read_tix(find_tix(target.tix_path, fs_provider), fs_provider)
    aggregator = Aggregator(target.src_dirs, root=root, fs_provider=fs_provider)

    for module in tix:
        if module.name in excluded:
            logger.debug(f"Skipping excluded module {module.name}")
            continue
        mix_path = find_mix(module.name, target.mix_dirs, fs_provider)
        mix = read_mix(mix_path, fs_provider)
        aggregator.add(correlate_module(module, mix, check_hash=check_hash))

    result = aggregator.result()
    logger.info(f"Target {target.name}: {len(tix)} module(s), {len(result)} source file(s)")
    return result


def build_aggregate(
    targets: Sequence[Target],
    *,
    exclude_modules: Iterable[str] = (),
    root: Optional[PathLike] = None,
    check_hash: bool = True,
    fs_provider: Optional[FileSystemProvider] = None,
) -> Aggregate:
    """Aggregate every target, then merge the per-target partials."""
    if not targets:
        log_and_raise(NoTargetError(), logger)
    exclude_modules = list(exclude_modules)
    partials = [
        aggregate_target(
            target,
            exclude_modules=exclude_modules,
            root=root,
            check_hash=check_hash,
            fs_provider=fs_provider,
        )
        for target in targets
    ]
    return merge_all(partials)


def write_report(report: bytes, output: Optional[PathLike] = None) -> None:
    """
    Write to ``output``, or to stdout when it is None or ``-``.

    Raises:
        FileAccessError: If the output file or its directory cannot be written
    """
    if output is None or str(output) == "-":
        stream = getattr(sys.stdout, "buffer", None)
        if stream is not None:
            stream.write(report)
            stream.flush()
        else:
            sys.stdout.write(report.decode("utf-8"))
        return

    path = Path(output)
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "wb") as f:
            f.write(report)
    except OSError as e:
        error = FileAccessError(path, "write", e.strerror or str(e))
        logger.error(f"{type(error).__name__}: {error.describe()}")
        raise error from e
    logger.info(f"Wrote report to {path}")


def convert(
    targets: Sequence[Target],
    fmt: str = "codecov",
    output: Optional[PathLike] = None,
    *,
    exclude_modules: Iterable[str] = (),
    root: Optional[PathLike] = None,
    check_hash: bool = True,
    fs_provider: Optional[FileSystemProvider] = None,
) -> bytes:
    """
    Convert resolved targets into a report.

    This is the primary entry point for callers that already know their
    targets. The renderer is looked up before any file is read, so an unknown
    format fails fast.

    Args:
        targets: Resolved targets; at least one
        fmt: Report format name (``codecov``/``json`` or ``lcov``)
        output: Output file, ``-`` for stdout, or None to only return the bytes
        exclude_modules: Tix module names to skip
        root: Project root for shortening source paths
        check_hash: Reject mix files whose hash disagrees with the tix module
        fs_provider: Optional filesystem provider for dependency injection

    Returns:
        The rendered report

    Raises:
        HpcReportError: Any failure; no report is written in that case
    """
    renderer = get_renderer(fmt)
    aggregate = build_aggregate(
        targets,
        exclude_modules=exclude_modules,
        root=root,
        check_hash=check_hash,
        fs_provider=fs_provider,
    )
    report = renderer.render(aggregate)
    if output is not None:
        write_report(report, output)
    return report


def run(
    config: Union[ConversionConfig, PathLike, Dict[str, Any]],
    fs_provider: Optional[FileSystemProvider] = None,
) -> bytes:
    """
    Run a conversion described by a configuration.

    ``config`` may be a validated ``ConversionConfig``, a path to a YAML file
    or a plain dictionary. The report goes to ``config.output``, or stdout when
    that is unset.
    """
    if not isinstance(config, ConversionConfig):
        config = load_config(config)

    if config.verbose or config.log_file:
        configure_logging(verbose=config.verbose, log_file=config.log_file)
    if config.build_tool:
        logger.debug(f"Targets supplied by build tool {config.build_tool}")

    targets = resolve_targets(config, fs_provider)
    report = convert(
        targets,
        config.format,
        exclude_modules=config.exclude_modules,
        root=config.root,
        check_hash=config.check_hash,
        fs_provider=fs_provider,
    )
    write_report(report, config.output)
    return report


def main(config: Union[ConversionConfig, PathLike, Dict[str, Any]], prog: Optional[str] = None) -> bytes:
    """Run ``config`` under the brief-usage error handler (exits 1 on failure)."""
    return with_brief_usage_on_error(lambda: run(config), prog=prog)


__all__ = [
    "aggregate_target",
    "build_aggregate",
    "write_report",
    "convert",
    "run",
    "main",
]
