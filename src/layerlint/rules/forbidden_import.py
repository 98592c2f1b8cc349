"""Import allow-list enforcement for the inner layers."""

from __future__ import annotations

from typing import TYPE_CHECKING

from layerlint.rules.base import Capability, Rule

if TYPE_CHECKING:
    from layerlint.rules.base import Report
    from layerlint.syntax import ImportReference, ParsedFile


class ForbiddenLayerImportRule(Rule):
    """Reject imports outside the allow-list of the file's layer.

    Every governed layer may import the common foundations (``kotlin.*``,
    ``java.*``, ``arrow.core.*``, ``arrow.fx.coroutines.*``,
    ``kotlinx.coroutines.*``, ``org.slf4j.*``) plus the packages its policy
    entry lists, e.g. the application layer also sees the domain layer.
    Layers without an import constraint are not checked.
    """

    name = "ForbiddenLayerImport"
    description = (
        "Import not allowed in this layer. Only kotlin.*, java.*, arrow.core.*, "
        "arrow.fx.coroutines.*, kotlinx.coroutines.*, org.slf4j.*, "
        "and own layer packages are permitted."
    )
    capabilities = Capability.IMPORTS

    def visit_import(self, file: ParsedFile, ref: ImportReference, report: Report) -> None:
        if not self.applies_to(file):
            return
        if ref.imported_path is None:
            return

        layer = self.policy.classify(file.package_name)
        entry = self.policy.lookup(layer)
        if entry is None or entry.allowed_import_prefixes is None:
            return

        if not self.policy.is_import_allowed(entry, ref.imported_path):
            message = f"Import '{ref.imported_path}' is not allowed in {layer.value} layer."
            report(self.finding(file, ref.location, message))
