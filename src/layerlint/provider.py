"""Rule set provider: register architecture rules under stable names."""

from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import TYPE_CHECKING

from layerlint.config import RULE_SET_KEY
from layerlint.layers import DEFAULT_TEST_MARKER
from layerlint.policy import default_policy
from layerlint.rules import ForbiddenLayerImportRule, NoThrowOutsidePresentationRule

if TYPE_CHECKING:
    from collections.abc import Callable, Mapping

    from layerlint.config import LintConfig, RuleConfig
    from layerlint.policy import PolicyTable
    from layerlint.rules import Rule

    RuleFactory = Callable[[RuleConfig | None], Rule]

RULE_SET_ID = RULE_SET_KEY


@dataclass(frozen=True)
class RuleSet:
    """Named rule factories, in registration order."""

    rule_set_id: str
    rules: Mapping[str, RuleFactory]

    def create(self, config: LintConfig) -> list[Rule]:
        """Instantiate every rule with its settings from *config*."""
        return [factory(config.rule_config(name)) for name, factory in self.rules.items()]


class ArchitectureLayerRuleSetProvider:
    """Provide the architecture layer rules.

    The policy table is injected so the host decides which project base the
    rules govern.  Adding a rule means adding one entry to :meth:`provide`.
    """

    rule_set_id = RULE_SET_ID

    def __init__(
        self,
        policy: PolicyTable | None = None,
        *,
        test_marker: str = DEFAULT_TEST_MARKER,
    ) -> None:
        self.policy = policy if policy is not None else default_policy()
        self.test_marker = test_marker

    @classmethod
    def from_config(cls, config: LintConfig) -> ArchitectureLayerRuleSetProvider:
        return cls(default_policy(config.project_base), test_marker=config.test_marker)

    def provide(self) -> dict[str, RuleFactory]:
        policy = self.policy
        marker = self.test_marker
        return {
            NoThrowOutsidePresentationRule.name: lambda config: NoThrowOutsidePresentationRule(
                config, policy, test_marker=marker
            ),
            ForbiddenLayerImportRule.name: lambda config: ForbiddenLayerImportRule(
                config, policy, test_marker=marker
            ),
        }

    def instance(self) -> RuleSet:
        return RuleSet(self.rule_set_id, MappingProxyType(self.provide()))


def rule_names() -> list[str]:
    """Return the registered rule names in registration order."""
    return list(ArchitectureLayerRuleSetProvider().provide())
