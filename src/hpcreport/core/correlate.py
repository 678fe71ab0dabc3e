"""
Pairing tick counts with mix entries.

The i-th tick of a tix module counts executions of the region described by the
i-th entry of the module's mix file. That pairing is only meaningful when both
were produced by the same compilation, so a length or hash disagreement is
reported as an error instead of being papered over by zipping to the shorter
sequence.
"""

from typing import List, Sequence

from hpcreport import logger
from hpcreport.core.models import CoverageRecord, MixEntry, MixFile, TixModule
from hpcreport.exceptions import HashMismatchError, LengthMismatchError, log_and_raise


def correlate(
    ticks: Sequence[int],
    entries: Sequence[MixEntry],
    *,
    module: str,
    source_path: str,
) -> List[CoverageRecord]:
    """
    Produce one ``CoverageRecord`` per index, in order.

    Raises:
        LengthMismatchError: If ``ticks`` and ``entries`` differ in length
    """
    if len(ticks) != len(entries):
        log_and_raise(LengthMismatchError(module, len(ticks), len(entries)), logger)

    return [
        CoverageRecord(
            module=module,
            source_path=source_path,
            position=entry.position,
            label=entry.label,
            hits=hits,
        )
        for hits, entry in zip(ticks, entries)
    ]


def correlate_module(tix_module: TixModule, mix: MixFile, check_hash: bool = True) -> List[CoverageRecord]:
    """
    Correlate a tix module with its parsed mix file.

    Raises:
        HashMismatchError: If ``check_hash`` and the hashes differ
        LengthMismatchError: If the tick and entry counts differ
    """
    if check_hash and tix_module.hash != mix.hash:
        log_and_raise(HashMismatchError(tix_module.name, tix_module.hash, mix.hash), logger)

    records = correlate(
        tix_module.ticks,
        mix.entries,
        module=tix_module.name,
        source_path=mix.source_path,
    )
    logger.debug(f"Correlated {len(records)} region(s) of module {tix_module.name}")
    return records


__all__ = ["correlate", "correlate_module"]
