"""
Pydantic configuration models for a conversion run.

``ConversionConfig`` is what the command-line or build-tool layer hands over:
the targets to convert, where to search for mix and source files, which
modules to leave out, and which report to write where. ``TargetSpec`` names a
single target either by tix path or by test-suite name; suite names are
looked up in ``ConversionConfig.test_suites``, which the build-tool layer
fills in.
"""

import logging
from pathlib import Path
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

logger = logging.getLogger(__name__)

DEFAULT_MIX_DIRS = [".hpc"]
BUILD_TOOLS = ("stack", "cabal")


class TargetSpec(BaseModel):
    """
    One requested target.

    Attributes:
        tix: Path to the target's tix file
        test_suite: Name of a test suite whose tix file the build tool knows
        mix_dirs: Mix search directories specific to this target
        src_dirs: Source search directories specific to this target
    """

    model_config = ConfigDict(extra="forbid", str_strip_whitespace=True, frozen=True)

    tix: Optional[str] = Field(default=None, description="Path to a .tix file")
    test_suite: Optional[str] = Field(default=None, description="Test suite name")
    mix_dirs: List[str] = Field(default_factory=list)
    src_dirs: List[str] = Field(default_factory=list)

    @model_validator(mode="after")
    def exactly_one_source(self) -> "TargetSpec":
        if (self.tix is None) == (self.test_suite is None):
            raise ValueError("a target needs exactly one of 'tix' or 'test_suite'")
        return self

    @property
    def name(self) -> str:
        return self.test_suite if self.test_suite is not None else str(self.tix)


class ConversionConfig(BaseModel):
    """
    Everything one conversion needs.

    Attributes:
        targets: Targets to convert; at least one
        test_suites: Test suite name to tix path, from the build tool
        mix_dirs: Mix search directories appended after each target's own
        src_dirs: Source search directories appended after each target's own
        exclude_modules: Tix module names to skip
        format: Report format name
        output: Output file; stdout when unset
        root: Project root used to shorten source paths
        build_tool: Build tool that produced the targets, if any
        check_hash: Reject mix files whose hash disagrees with the tix module
        verbose: Log every searched location
        log_file: Additional rotating log file
    """

    model_config = ConfigDict(
        extra="forbid",
        validate_assignment=True,
        str_strip_whitespace=True,
    )

    targets: List[TargetSpec] = Field(..., min_length=1)
    test_suites: Dict[str, str] = Field(default_factory=dict)
    mix_dirs: List[str] = Field(default_factory=lambda: list(DEFAULT_MIX_DIRS))
    src_dirs: List[str] = Field(default_factory=list)
    exclude_modules: List[str] = Field(default_factory=list)
    format: str = Field(default="codecov")
    output: Optional[str] = None
    root: Optional[str] = None
    build_tool: Optional[str] = None
    check_hash: bool = True
    verbose: bool = False
    log_file: Optional[str] = None

    @field_validator("targets", mode="before")
    @classmethod
    def coerce_target_strings(cls, v):
        """Accept bare strings: ``*.tix`` paths become tix targets, anything else a suite name."""
        if not isinstance(v, list):
            return v
        coerced = []
        for item in v:
            if isinstance(item, (str, Path)):
                text = str(item)
                coerced.append({"tix": text} if text.endswith(".tix") else {"test_suite": text})
            else:
                coerced.append(item)
        return coerced

    @field_validator("exclude_modules")
    @classmethod
    def drop_blank_modules(cls, v: List[str]) -> List[str]:
        cleaned = [m.strip() for m in v if m.strip()]
        if len(cleaned) != len(v):
            logger.debug("Ignoring blank exclude_modules entries")
        return cleaned


__all__ = ["BUILD_TOOLS", "DEFAULT_MIX_DIRS", "TargetSpec", "ConversionConfig"]
