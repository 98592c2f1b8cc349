"""Rule contract shared by all architecture rules."""

from __future__ import annotations

import enum
import fnmatch
from abc import ABC
from typing import TYPE_CHECKING, ClassVar

from layerlint.config import RuleConfig
from layerlint.findings import Finding
from layerlint.layers import DEFAULT_TEST_MARKER, is_test_source

if TYPE_CHECKING:
    from collections.abc import Callable

    from layerlint.findings import Location, Severity
    from layerlint.policy import PolicyTable
    from layerlint.syntax import ImportReference, ParsedFile, ThrowSite

    Report = Callable[[Finding], None]


class Capability(enum.Flag):
    """Node kinds a rule wants to be called back for."""

    NONE = 0
    IMPORTS = enum.auto()
    THROWS = enum.auto()


class Rule(ABC):
    """Base class for a single architecture check.

    A rule holds only its configuration and the read-only policy table, so
    one instance can serve any number of files, concurrently.  Violations go
    out through the *report* callback handed to each visit method.

    Subclasses set ``name``, ``description`` and ``capabilities`` and
    override the matching ``visit_*`` methods.
    """

    name: ClassVar[str]
    description: ClassVar[str]
    capabilities: ClassVar[Capability] = Capability.NONE

    def __init__(
        self,
        config: RuleConfig | None,
        policy: PolicyTable,
        *,
        test_marker: str = DEFAULT_TEST_MARKER,
    ) -> None:
        self.config = config if config is not None else RuleConfig()
        self.policy = policy
        self.test_marker = test_marker

    def __repr__(self) -> str:
        return f"{type(self).__name__}(active={self.active}, severity={self.severity.value})"

    @property
    def active(self) -> bool:
        return self.config.active

    @property
    def severity(self) -> Severity:
        return self.config.severity

    def applies_to(self, file: ParsedFile) -> bool:
        """Return False for test sources and files matched by ``excludes``."""
        if is_test_source(file.path, self.test_marker):
            return False
        return not any(fnmatch.fnmatch(file.path, pattern) for pattern in self.config.excludes)

    def visit_import(self, file: ParsedFile, ref: ImportReference, report: Report) -> None:
        return None

    def visit_throw(self, file: ParsedFile, site: ThrowSite, report: Report) -> None:
        return None

    def finding(self, file: ParsedFile, location: Location, message: str) -> Finding:
        return Finding(
            rule_name=self.name,
            file_path=file.path,
            location=location,
            message=message,
            severity=self.severity,
        )
