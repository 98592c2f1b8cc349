"""Result-type discipline: no ``throw`` below the presentation layer."""

from __future__ import annotations

from typing import TYPE_CHECKING

from layerlint.rules.base import Capability, Rule

if TYPE_CHECKING:
    from layerlint.rules.base import Report
    from layerlint.syntax import ParsedFile, ThrowSite


class NoThrowOutsidePresentationRule(Rule):
    """Forbid ``throw`` in layers whose policy disallows it.

    Errors there must be returned as ``Either<XxxError, T>`` so that the
    return type alone lists every failure a caller can see.  The presentation
    layer may still throw (e.g. ``ResponseStatusException``).
    """

    name = "NoThrowOutsidePresentation"
    description = (
        "throw is forbidden in domain, application, and infrastructure layers. "
        "Return Either<XxxError, T> instead."
    )
    capabilities = Capability.THROWS

    def visit_throw(self, file: ParsedFile, site: ThrowSite, report: Report) -> None:
        if not self.applies_to(file):
            return

        entry = self.policy.lookup(self.policy.classify(file.package_name))
        if entry is None or entry.throw_allowed:
            return

        message = (
            f"throw detected in package '{file.package_name}'. "
            "Use a typed result (Either<XxxError, T>) instead of throwing."
        )
        report(self.finding(file, site.location, message))
