"""Turning configured target specs into resolved ``Target`` records."""

from pathlib import Path
from typing import List, Optional

from hpcreport import logger
from hpcreport.config.models import ConversionConfig, TargetSpec
from hpcreport.core.models import Target
from hpcreport.discovery.resolver import find_tix
from hpcreport.exceptions import NoTargetError, TestSuiteNotFoundError, log_and_raise
from hpcreport.utils.paths import FileSystemProvider


def resolve_target(
    spec: TargetSpec,
    config: ConversionConfig,
    fs_provider: Optional[FileSystemProvider] = None,
) -> Target:
    """
    Resolve one target spec.

    Per-target search directories come first, followed by the global ones.

    Raises:
        TestSuiteNotFoundError: If a named suite has no tix path
        TixNotFoundError: If the tix file does not exist
    """
    if spec.test_suite is not None:
        tix = config.test_suites.get(spec.test_suite)
        if tix is None:
            log_and_raise(TestSuiteNotFoundError(spec.test_suite), logger)
    else:
        tix = spec.tix

    tix_path = find_tix(Path(tix), fs_provider)
    target = Target(
        name=spec.name,
        tix_path=tix_path,
        mix_dirs=tuple(spec.mix_dirs) + tuple(config.mix_dirs),
        src_dirs=tuple(spec.src_dirs) + tuple(config.src_dirs),
    )
    logger.debug(f"Target {target.name}: tix={target.tix_path}, mix_dirs={list(target.mix_dirs)}")
    return target


def resolve_targets(
    config: ConversionConfig,
    fs_provider: Optional[FileSystemProvider] = None,
) -> List[Target]:
    """Resolve every target of ``config``, in order."""
    if not config.targets:
        log_and_raise(NoTargetError(), logger)
    return [resolve_target(spec, config, fs_provider) for spec in config.targets]


__all__ = ["resolve_target", "resolve_targets"]
