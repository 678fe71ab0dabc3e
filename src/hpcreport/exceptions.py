"""
hpcreport Exception Hierarchy

Every failure in the conversion pipeline is raised as a subclass of
``HpcReportError``. Each subclass carries the structured fields of its failure
(paths, searched locations, module names) as attributes, an error code for
programmatic handling and a context dictionary for logging. ``str(exc)`` is the
human-readable message printed by the top-level handler.

The hierarchy:
- HpcReportError: base for all errors
- NoTargetError, TixNotFoundError, TestSuiteNotFoundError: target resolution
- MixNotFoundError, SrcNotFoundError: exhaustive search failures
- InvalidBuildToolError, InvalidFormatError, InvalidArgsError: option validation
- TraceParseError, LengthMismatchError, HashMismatchError: malformed or
  inconsistent tix/mix pairs
- FileAccessError: an input that cannot be read or a report that cannot be
  written

Usage Examples:
    Pattern matching on the failure kind:
    >>> try:
    ...     convert(targets, "lcov")
    ... except MixNotFoundError as e:
    ...     print(e.searched)

    Top-level handling:
    >>> with_brief_usage_on_error(lambda: run(config))
"""

import functools
import sys
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Sequence, TypeVar, Union

from hpcreport.utils.show import show_string

T = TypeVar("T")


class HpcReportError(Exception):
    """
    Base exception class for all hpcreport errors.

    Attributes:
        error_code (str): Unique identifier for programmatic error handling
        context (Dict[str, Any]): Additional context information for debugging

    Error Codes:
        HPC_000: Generic hpcreport error
    """

    default_code = "HPC_000"

    def __init__(
        self,
        message: str,
        error_code: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None
    ) -> None:
        """
        Initialize the error with message, error code, and context.

        Args:
            message: Human-readable error description
            error_code: Unique identifier for programmatic error handling
            context: Additional context information for debugging
        """
        super().__init__(message)
        self.message = message
        self.error_code = error_code or self.default_code
        self.context = dict(context or {})

    def with_context(self, context: Dict[str, Any]) -> 'HpcReportError':
        """
        Add additional context to the exception and return self for chaining.

        Example:
            >>> raise TraceParseError("foo.tix", 3, "bad token").with_context({
            ...     "target": "unit-tests",
            ... })
        """
        self.context.update(context)
        return self

    def __str__(self) -> str:
        return self.message

    def describe(self) -> str:
        """Return the message together with the error code and context."""
        if self.context:
            context_str = ", ".join(f"{k}={v}" for k, v in self.context.items())
            return f"{self.message} [Error Code: {self.error_code}, Context: {context_str}]"
        return f"{self.message} [Error Code: {self.error_code}]"

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}("
            f"message={self.message!r}, "
            f"error_code={self.error_code!r}, "
            f"context={self.context!r})"
        )


def _quote(value: Union[str, Path]) -> str:
    return show_string(value)


def _searched_locations(what: str, path: Union[str, Path], locations: Sequence[Union[str, Path]]) -> str:
    suffix = "" if len(locations) == 1 else "s"
    lines = [f"cannot find {what}: {_quote(path)}", f"searched location{suffix}:"]
    lines.extend(f"  {location}" for location in locations)
    return "\n".join(lines)


class NoTargetError(HpcReportError):
    """No target was given."""

    default_code = "HPC_001"

    def __init__(self) -> None:
        super().__init__("no TARGET was given")


class TixNotFoundError(HpcReportError):
    """A tix file path was given but does not exist."""

    default_code = "HPC_002"

    def __init__(self, path: Union[str, Path]) -> None:
        self.path = str(path)
        super().__init__(f"cannot find tix: {_quote(path)}", context={"tix_path": self.path})


class SearchError(HpcReportError):
    """
    Common base for exhaustive search failures.

    Attributes:
        path: The path as declared (by the tix file, or by a mix file)
        searched: Every location tried, in the order tried
    """

    what = "file"

    def __init__(self, path: Union[str, Path], searched: Sequence[Union[str, Path]]) -> None:
        self.path = str(path)
        self.searched = [str(location) for location in searched]
        super().__init__(
            _searched_locations(self.what, self.path, self.searched),
            context={"declared_path": self.path, "searched_count": len(self.searched)},
        )


class MixNotFoundError(SearchError):
    """A module's mix file could not be found in any candidate directory."""

    default_code = "HPC_003"
    what = "mix"


class SrcNotFoundError(SearchError):
    """A source file named by a mix file could not be found."""

    default_code = "HPC_004"
    what = "src"


class InvalidBuildToolError(HpcReportError):
    """Unrecognized build tool name."""

    default_code = "HPC_005"

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"invalid build tool: `{name}'")


class InvalidFormatError(HpcReportError):
    """Unrecognized report format name."""

    default_code = "HPC_006"

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"invalid format: `{name}'")


class TestSuiteNotFoundError(HpcReportError):
    """A test suite was named but has no tix file."""

    __test__ = False
    default_code = "HPC_007"

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"cannot find tix for test suite: {_quote(name)}")


class InvalidArgsError(HpcReportError):
    """One or more option validation failures."""

    default_code = "HPC_008"

    def __init__(self, messages: Sequence[str]) -> None:
        self.messages = list(messages)
        if len(self.messages) == 1:
            message = self.messages[0]
        else:
            message = "".join(f"\n  - {m}" for m in self.messages)
        super().__init__(message, context={"error_count": len(self.messages)})


class TraceParseError(HpcReportError):
    """
    A tix or mix file is malformed.

    Attributes:
        source: Name of the input (file path, or ``<tix>``/``<mix>`` for raw bytes)
        offset: Character offset of the failure in the decoded text, the byte
            offset of the first undecodable byte for invalid UTF-8, or None
            when not applicable
        detail: What went wrong
    """

    default_code = "HPC_009"

    def __init__(self, source: str, offset: Optional[int], detail: str) -> None:
        self.source = source
        self.offset = offset
        self.detail = detail
        where = f"{source}" if offset is None else f"{source} at offset {offset}"
        super().__init__(f"cannot parse {where}: {detail}")


class LengthMismatchError(HpcReportError):
    """Tick array and mix entries of one module differ in length."""

    default_code = "HPC_010"

    def __init__(self, module: str, tick_count: int, entry_count: int) -> None:
        self.module = module
        self.tick_count = tick_count
        self.entry_count = entry_count
        super().__init__(
            f"tick count mismatch for module {_quote(module)}: "
            f"tix has {tick_count} ticks, mix has {entry_count} entries",
            context={"module": module},
        )


class HashMismatchError(HpcReportError):
    """The tix module hash disagrees with the mix hash (stale mix file)."""

    default_code = "HPC_011"

    def __init__(self, module: str, tix_hash: int, mix_hash: int) -> None:
        self.module = module
        self.tix_hash = tix_hash
        self.mix_hash = mix_hash
        super().__init__(
            f"hash in tix file for module {_quote(module)} ({tix_hash}) "
            f"does not match hash in mix ({mix_hash})",
            context={"module": module},
        )


class FileAccessError(HpcReportError):
    """
    A file exists but cannot be read, or the report cannot be written.

    Attributes:
        path: The file concerned
        action: ``read`` or ``write``
        reason: The operating system's explanation
    """

    default_code = "HPC_012"

    def __init__(self, path: Union[str, Path], action: str, reason: str) -> None:
        self.path = str(path)
        self.action = action
        self.reason = reason
        what = "report" if action == "write" else "file"
        super().__init__(
            f"cannot {action} {what} {_quote(path)}: {reason}",
            context={"path": self.path, "action": action},
        )


def log_and_raise(
    exception: HpcReportError,
    logger: Optional[Any] = None,
    level: str = "error"
) -> None:
    """
    Log an exception with context and then raise it.

    Args:
        exception: The exception to log and raise
        logger: Logger instance to use (optional)
        level: Log level ("error", "warning", "critical")

    Raises:
        The provided exception after logging
    """
    if logger is not None:
        log_method = getattr(logger, level, logger.error)
        log_method(f"{exception.__class__.__name__}: {exception.describe()}")

    raise exception


def with_brief_usage_on_error(
    action: Optional[Callable[[], T]] = None,
    *,
    prog: Optional[str] = None,
    stream=None,
):
    """
    Run ``action`` and turn an ``HpcReportError`` into a brief usage message.

    On failure prints ``Error: <message>`` and a one-line hint to rerun with
    ``--help``, then exits with status 1. Without ``action`` this returns a
    decorator applying the same handler to the decorated function.
    """
    def handle(func: Callable[..., T]) -> Callable[..., T]:
        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            try:
                return func(*args, **kwargs)
            except HpcReportError as e:
                out = stream if stream is not None else sys.stderr
                name = prog or Path(sys.argv[0]).name or "hpcreport"
                out.write(f"Error: {e}\n")
                out.write(f"Run '{name} --help' for usage.\n")
                raise SystemExit(1) from e
        return wrapper

    if action is None:
        return handle
    return handle(action)()


__all__ = [
    'HpcReportError',
    'NoTargetError',
    'TixNotFoundError',
    'SearchError',
    'MixNotFoundError',
    'SrcNotFoundError',
    'InvalidBuildToolError',
    'InvalidFormatError',
    'TestSuiteNotFoundError',
    'InvalidArgsError',
    'TraceParseError',
    'LengthMismatchError',
    'HashMismatchError',
    'FileAccessError',
    'log_and_raise',
    'with_brief_usage_on_error',
]
