"""Discovery of tix, mix and source files across candidate directories."""

from .resolver import (
    MIX_SUFFIX,
    candidate_locations,
    find_mix,
    find_src,
    find_tix,
    mix_path_for_module,
    resolve,
)

__all__ = [
    "MIX_SUFFIX",
    "candidate_locations",
    "find_mix",
    "find_src",
    "find_tix",
    "mix_path_for_module",
    "resolve",
]
