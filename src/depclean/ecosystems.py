"""Ecosystem rule definitions for depclean."""

import os
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, ConfigDict

from depclean.models import Classification, EcosystemRule

# Order matters: folder names shared by several ecosystems (vendor, target)
# resolve to the first rule whose indicator file is present.
ECOSYSTEM_RULES: tuple[EcosystemRule, ...] = (
    EcosystemRule(
        name="Node.js",
        candidate_names=("node_modules",),
        indicator="package.json",
        description="npm/yarn/pnpm packages",
    ),
    EcosystemRule(
        name="Python venv",
        candidate_names=("venv", ".venv", "env", ".env", "__pycache__"),
        indicator="requirements.txt",
        description="Python virtual environments and bytecode caches",
    ),
    EcosystemRule(
        name="Go",
        candidate_names=("vendor",),
        indicator="go.mod",
        description="Go vendored modules",
    ),
    EcosystemRule(
        name="Gradle",
        candidate_names=(".gradle", "build"),
        indicator="build.gradle",
        description="Gradle caches and build output",
    ),
    EcosystemRule(
        name="Maven",
        candidate_names=("target",),
        indicator="pom.xml",
        description="Maven build output",
    ),
    EcosystemRule(
        name="Rust",
        candidate_names=("target",),
        indicator="Cargo.toml",
        description="Cargo build output",
    ),
    EcosystemRule(
        name="Ruby",
        candidate_names=("vendor/bundle", ".bundle"),
        indicator="Gemfile",
        description="Bundler packages",
    ),
    EcosystemRule(
        name="PHP",
        candidate_names=("vendor",),
        indicator="composer.json",
        description="Composer packages",
    ),
    EcosystemRule(
        name=".NET",
        candidate_names=("bin", "obj", "packages"),
        indicator="*.csproj",
        description=".NET build output and packages",
    ),
    EcosystemRule(
        name="iOS/macOS",
        candidate_names=("Pods", "DerivedData"),
        indicator="Podfile",
        description="CocoaPods and Xcode build data",
    ),
)

# Caches that are worth cleaning even without a project manifest next to them
INDICATOR_EXEMPT_NAMES = frozenset({"node_modules", "__pycache__"})

# Hidden directories that are themselves cleanup targets
HIDDEN_ALLOWED_NAMES = frozenset({".gradle", ".venv", ".env", ".bundle"})

# Never descend into these, even when no rule claimed them
ALWAYS_SKIP_NAMES = frozenset(
    {
        ".git",
        ".svn",
        ".hg",
        "node_modules",
        "vendor",
        ".gradle",
        "build",
        "venv",
        ".venv",
    }
)


class EcosystemRuleTable(BaseModel):
    """Ordered classification rules plus the walker's name-based skip lists."""

    model_config = ConfigDict(frozen=True)

    rules: tuple[EcosystemRule, ...] = ECOSYSTEM_RULES
    indicator_exempt: frozenset[str] = INDICATOR_EXEMPT_NAMES
    hidden_allowed: frozenset[str] = HIDDEN_ALLOWED_NAMES
    always_skip: frozenset[str] = ALWAYS_SKIP_NAMES

    def classify(self, name: str, path: Path) -> Optional[Classification]:
        """
        Decide which ecosystem, if any, a directory belongs to.

        Rules are tried in table order and candidates in rule order. A plain
        candidate matches the directory name; a compound one ('vendor/bundle')
        matches the trailing segments of the path. When a rule's indicator
        file is missing from the parent directory, the rule is dropped and
        the next rule is tried, unless the candidate is indicator-exempt.

        Args:
            name: Directory name
            path: Absolute directory path

        Returns:
            Classification, or None if no rule accepts the directory
        """
        for rule in self.rules:
            for candidate in rule.candidate_names:
                if not _candidate_matches(candidate, name, path):
                    continue

                # For compound candidates this is still the immediate parent
                project_root = path.parent
                if (
                    rule.has_checkable_indicator
                    and candidate not in self.indicator_exempt
                    and not os.path.exists(project_root / rule.indicator)
                ):
                    break

                return Classification(rule=rule, matched_name=candidate)

        return None

    def is_hidden_pruned(self, name: str) -> bool:
        """Dot-prefixed directories are skipped unless they are cleanup targets."""
        return name.startswith(".") and name not in self.hidden_allowed

    def is_always_skipped(self, name: str) -> bool:
        return name in self.always_skip

    def get_rule(self, name: str) -> Optional[EcosystemRule]:
        """Get a rule by ecosystem name."""
        for rule in self.rules:
            if rule.name == name:
                return rule
        return None


def _candidate_matches(candidate: str, name: str, path: Path) -> bool:
    if candidate == name:
        return True
    if EcosystemRule.is_compound(candidate):
        parts = tuple(candidate.split("/"))
        return path.parts[-len(parts):] == parts
    return False


DEFAULT_RULE_TABLE = EcosystemRuleTable()


def get_rule_table() -> EcosystemRuleTable:
    """Get the default rule table."""
    return DEFAULT_RULE_TABLE


def get_all_rules() -> list[EcosystemRule]:
    """Get all rules in priority order."""
    return list(DEFAULT_RULE_TABLE.rules)
