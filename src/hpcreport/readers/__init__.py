"""Readers for HPC tix and mix files."""

from .mix import parse_mix, read_mix
from .tix import parse_tix, read_tix

__all__ = ["parse_mix", "read_mix", "parse_tix", "read_tix"]
