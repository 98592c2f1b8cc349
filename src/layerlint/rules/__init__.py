"""Architecture rules: contract, import allow-lists, and the no-throw check."""

from layerlint.rules.base import Capability, Rule
from layerlint.rules.forbidden_import import ForbiddenLayerImportRule
from layerlint.rules.no_throw import NoThrowOutsidePresentationRule

__all__ = [
    "Capability",
    "ForbiddenLayerImportRule",
    "NoThrowOutsidePresentationRule",
    "Rule",
]
