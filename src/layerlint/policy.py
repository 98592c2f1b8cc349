"""Policy table: per-layer import allow-lists and throw permissions."""

from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import TYPE_CHECKING

from layerlint.layers import DEFAULT_PROJECT_BASE, LayerId, classify

if TYPE_CHECKING:
    from collections.abc import Mapping

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

# Foundational dependencies every governed layer may import.
COMMON_ALLOWED_PREFIXES: tuple[str, ...] = (
    "kotlin.",
    "java.",
    "arrow.core.",
    "arrow.fx.coroutines.",
    "kotlinx.coroutines.",
    "org.slf4j.",
)

# ---------------------------------------------------------------------------
# Data classes
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class PolicyEntry:
    """Constraints that apply to one layer.

    ``allowed_import_prefixes`` is ``None`` when the layer has no import
    constraint at all; the throw policy still applies in that case.
    """

    allowed_import_prefixes: frozenset[str] | None
    throw_allowed: bool


@dataclass(frozen=True)
class PolicyTable:
    """Read-only mapping from layer to :class:`PolicyEntry`."""

    entries: Mapping[LayerId, PolicyEntry]
    common_prefixes: tuple[str, ...] = COMMON_ALLOWED_PREFIXES
    project_base: str = DEFAULT_PROJECT_BASE

    def __post_init__(self) -> None:
        object.__setattr__(self, "entries", MappingProxyType(dict(self.entries)))

    def lookup(self, layer: LayerId) -> PolicyEntry | None:
        """Return the entry for *layer*, or ``None`` when no policy applies."""
        return self.entries.get(layer)

    def classify(self, package_path: str) -> LayerId:
        return classify(package_path, self.project_base)

    def is_import_allowed(self, entry: PolicyEntry, import_path: str) -> bool:
        """Return True if *import_path* starts with a common or layer prefix.

        Layers without an import constraint allow everything.
        """
        if entry.allowed_import_prefixes is None:
            return True
        if import_path.startswith(self.common_prefixes):
            return True
        return any(import_path.startswith(p) for p in entry.allowed_import_prefixes)


def default_policy(project_base: str = DEFAULT_PROJECT_BASE) -> PolicyTable:
    """Build the compiled-in policy table for *project_base*."""
    domain = f"{project_base}.domain."
    application = f"{project_base}.application."
    return PolicyTable(
        entries={
            LayerId.DOMAIN: PolicyEntry(
                allowed_import_prefixes=frozenset({domain}),
                throw_allowed=False,
            ),
            LayerId.APPLICATION: PolicyEntry(
                allowed_import_prefixes=frozenset({domain, application}),
                throw_allowed=False,
            ),
            LayerId.INFRASTRUCTURE: PolicyEntry(allowed_import_prefixes=None, throw_allowed=False),
            LayerId.PRESENTATION: PolicyEntry(allowed_import_prefixes=None, throw_allowed=True),
        },
        project_base=project_base,
    )
