"""Linter orchestrator: collect sources, drive rules, isolate failures, format results."""

from __future__ import annotations

import fnmatch
import json
import logging
import time
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING

from layerlint.config import CONFIG_FILENAME, LintConfig, load_config
from layerlint.findings import Severity
from layerlint.provider import ArchitectureLayerRuleSetProvider, rule_names
from layerlint.rules import Capability
from layerlint.syntax import KOTLIN_EXTENSIONS, parse_kotlin

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable, Sequence

    from layerlint.findings import Finding
    from layerlint.rules import Rule
    from layerlint.syntax import ImportReference, ParsedFile, ThrowSite

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------------


class LintError(Exception):
    """Raised when lint encounters a configuration error."""


# ---------------------------------------------------------------------------
# Data classes
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class FileFailure:
    """A file whose analysis aborted; other files are unaffected."""

    file_path: str
    message: str


@dataclass
class LintResult:
    """Result of a lint run."""

    findings: list[Finding] = field(default_factory=list)
    failures: list[FileFailure] = field(default_factory=list)
    rules_evaluated: int = 0
    files_scanned: int = 0
    elapsed_ms: float = 0.0


# ---------------------------------------------------------------------------
# Per-file analysis
# ---------------------------------------------------------------------------


class _RuleDispatcher:
    """Fan syntax callbacks out to the rules that asked for them."""

    def __init__(
        self, file: ParsedFile, rules: Sequence[Rule], report: Callable[[Finding], None]
    ) -> None:
        self._file = file
        self._report = report
        self._import_rules = [r for r in rules if Capability.IMPORTS in r.capabilities]
        self._throw_rules = [r for r in rules if Capability.THROWS in r.capabilities]

    def visit_import(self, ref: ImportReference) -> None:
        for rule in self._import_rules:
            rule.visit_import(self._file, ref, self._report)

    def visit_throw(self, site: ThrowSite) -> None:
        for rule in self._throw_rules:
            rule.visit_throw(self._file, site, self._report)


def analyze_file(file: ParsedFile, rules: Sequence[Rule]) -> list[Finding]:
    """Run every active rule over one parsed file.

    Findings come back in visitation (source) order.
    """
    findings: list[Finding] = []
    active = [rule for rule in rules if rule.active]
    if active:
        file.tree.accept(_RuleDispatcher(file, active, findings.append))
    return findings


# ---------------------------------------------------------------------------
# Source collection
# ---------------------------------------------------------------------------


def _is_excluded(path: Path, excludes: Sequence[str]) -> bool:
    posix = path.as_posix()
    return any(fnmatch.fnmatch(posix, pattern) for pattern in excludes)


def collect_sources(paths: Iterable[Path], excludes: Sequence[str] = ()) -> list[Path]:
    """Expand files and directories into a sorted list of Kotlin sources."""
    found: set[Path] = set()
    for path in paths:
        if path.is_dir():
            for candidate in path.rglob("*"):
                if candidate.suffix in KOTLIN_EXTENSIONS and candidate.is_file():
                    found.add(candidate.resolve())
        elif path.is_file() and path.suffix in KOTLIN_EXTENSIONS:
            found.add(path.resolve())
        else:
            logger.debug("Skipping %s: not a Kotlin source or directory", path)

    return sorted(p for p in found if not _is_excluded(p, excludes))


# ---------------------------------------------------------------------------
# Main entry point
# ---------------------------------------------------------------------------


def resolve_config(config_path: Path | None, project_root: Path | None = None) -> LintConfig:
    """Load the configuration, falling back to defaults when no file exists.

    Raises
    ------
    LintError
        When the configuration file is present but invalid.
    """
    if config_path is None:
        candidate = (project_root or Path.cwd()) / CONFIG_FILENAME
        if not candidate.is_file():
            return LintConfig()
        config_path = candidate

    try:
        return load_config(config_path, known_rules=rule_names())
    except (OSError, ValueError) as exc:
        msg = f"Invalid configuration: {exc}"
        raise LintError(msg) from exc


def _analyze_path(path: Path, rules: Sequence[Rule]) -> list[Finding]:
    return analyze_file(parse_kotlin(path), rules)


def lint(
    paths: Iterable[Path],
    *,
    config: LintConfig | None = None,
    jobs: int | None = None,
) -> LintResult:
    """Analyze every Kotlin source under *paths*.

    Parameters
    ----------
    paths:
        Files and/or directories to scan.
    config:
        Run configuration; defaults apply when *None*.
    jobs:
        Worker threads.  *None* lets the executor pick.

    Returns
    -------
    LintResult
        Findings sorted by file path then in-file order, plus per-file failures.
    """
    start = time.monotonic()
    config = config or LintConfig()

    provider = ArchitectureLayerRuleSetProvider.from_config(config)
    rules = provider.instance().create(config)
    active = [rule for rule in rules if rule.active]
    logger.debug("Active rules: %s", ", ".join(r.name for r in active) or "none")

    sources = collect_sources(paths, config.excludes)

    findings: list[Finding] = []
    failures: list[FileFailure] = []

    with ThreadPoolExecutor(max_workers=jobs) as executor:
        futures = [(path, executor.submit(_analyze_path, path, active)) for path in sources]
        for path, future in futures:
            try:
                findings.extend(future.result())
            except Exception as exc:
                logger.warning("Analysis failed for %s: %s", path, exc)
                failures.append(FileFailure(file_path=path.as_posix(), message=str(exc)))

    # Stable sort: findings within one file keep their visitation order.
    findings.sort(key=lambda f: f.file_path)

    return LintResult(
        findings=findings,
        failures=failures,
        rules_evaluated=len(active),
        files_scanned=len(sources),
        elapsed_ms=(time.monotonic() - start) * 1000,
    )


# ---------------------------------------------------------------------------
# Formatters
# ---------------------------------------------------------------------------


def format_rich(result: LintResult) -> str:
    """Format a LintResult as human-readable text rendered with Rich.

    Example output with findings::

        Rules: 2 active
        Files: 14 scanned

        ✗ ForbiddenLayerImport
          domain/src/.../Foo.kt:3:1 → Import 'org.springframework...' is not allowed ...

        1 finding (2 rules evaluated, 0.1s)
    """
    from io import StringIO

    from rich.console import Console
    from rich.text import Text

    buf = StringIO()
    console = Console(file=buf, force_terminal=False, width=120, highlight=False)

    console.print(f"Rules: {result.rules_evaluated} active")
    console.print(f"Files: {result.files_scanned} scanned")
    console.print()

    elapsed_str = f"{result.elapsed_ms / 1000:.1f}s"

    for finding in result.findings:
        header = Text()
        header.append("✗ ", style="bold red" if finding.severity is Severity.ERROR else "yellow")
        header.append(finding.rule_name, style="bold")
        console.print(header)
        console.print(
            Text(f"  {finding.file_path}:{finding.location} → {finding.message}"),
        )
        console.print()

    for failure in result.failures:
        console.print(Text(f"! {failure.file_path}: {failure.message}", style="magenta"))
    if result.failures:
        console.print()

    count = len(result.findings)
    if count:
        noun = "finding" if count == 1 else "findings"
        console.print(
            f"{count} {noun} ({result.rules_evaluated} rules evaluated, {elapsed_str})",
        )
    else:
        console.print(
            f"✓ No findings ({result.rules_evaluated} rules evaluated, {elapsed_str})",
        )

    return buf.getvalue().rstrip("\n")


def format_json(result: LintResult) -> str:
    """Format a LintResult as structured JSON with ``findings``, ``failures`` and ``summary``."""
    output: dict[str, object] = {
        "findings": [f.to_dict() for f in result.findings],
        "failures": [{"file_path": f.file_path, "message": f.message} for f in result.failures],
        "summary": {
            "rules_evaluated": result.rules_evaluated,
            "findings_count": len(result.findings),
            "failures_count": len(result.failures),
            "files_scanned": result.files_scanned,
            "elapsed_ms": result.elapsed_ms,
        },
    }
    return json.dumps(output, indent=2)


def format_porcelain(result: LintResult) -> str:
    """Format a LintResult as one line per finding.

    Format: ``rule_name:severity:file_path:line:column:message``

    Returns empty string when there are no findings.
    """
    lines = [
        f"{f.rule_name}:{f.severity.value}:{f.file_path}:{f.location.line}:"
        f"{f.location.column}:{f.message}"
        for f in result.findings
    ]
    return "\n".join(lines)
