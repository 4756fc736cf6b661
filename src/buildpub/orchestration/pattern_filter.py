"""
buildpub.orchestration.pattern_filter - Deployment Path Rules
===============================================================

Decides whether an artifact may be deployed, based on the include/exclude
glob rules from the publisher configuration. Rules are evaluated against
the artifact's repository-relative path (``org/acme/app/1.0/app-1.0.jar``),
never the filesystem path.

Conflict Rules:
    A path CONFLICTS (must be skipped) when
        - it matches any exclude rule, or
        - the include list is non-empty and it matches no include rule.
    Exclude always wins over include.

Glob Syntax:
    *      any characters within one path segment
    **     any characters across segments ("**/" also matches zero segments)
    ?      exactly one character within a segment
    dir/   shorthand for dir/**

Matching is case-sensitive and anchored at both ends.

Usage:
    >>> patterns = IncludeExcludePatterns(include=["**/*.jar"], exclude=["**/*-tests.jar"])
    >>> PatternFilter().matches("org/acme/app-1.0.pom", patterns)
    True
    >>> PatternFilter().matches("org/acme/app-1.0.jar", patterns)
    False
"""

from __future__ import annotations

import re
from functools import lru_cache
from typing import Iterable

import structlog

from buildpub.core.models import IncludeExcludePatterns


logger = structlog.get_logger()


# =============================================================================
# Glob Compilation
# =============================================================================
def _normalize(path: str) -> str:
    return path.replace("\\", "/").lstrip("/")


@lru_cache(maxsize=512)
def compile_glob(rule: str) -> re.Pattern[str]:
    """Translate a glob rule into an anchored regular expression."""
    rule = _normalize(rule)
    if rule.endswith("/"):
        rule += "**"

    # "dir/**" also matches "dir" itself
    suffix = ""
    if rule.endswith("/**"):
        rule = rule[: -len("/**")]
        suffix = "(?:/.*)?"

    parts: list[str] = []
    i = 0
    while i < len(rule):
        if rule.startswith("**/", i):
            parts.append("(?:.*/)?")
            i += 3
        elif rule.startswith("**", i):
            parts.append(".*")
            i += 2
        elif rule[i] == "*":
            parts.append("[^/]*")
            i += 1
        elif rule[i] == "?":
            parts.append("[^/]")
            i += 1
        else:
            parts.append(re.escape(rule[i]))
            i += 1

    return re.compile("".join(parts) + suffix)


def matches_any(path: str, rules: Iterable[str]) -> bool:
    """True if the path matches at least one glob rule."""
    normalized = _normalize(path)
    return any(compile_glob(rule).fullmatch(normalized) for rule in rules)


# =============================================================================
# Pattern Filter
# =============================================================================
class PatternFilter:
    """Evaluates artifact paths against include/exclude rules.

    Evaluation is pure; the only side effect is a debug log line explaining
    which side of the rules rejected a path.
    """

    def __init__(self) -> None:
        self._logger = logger.bind(component="pattern_filter")

    def matches(self, relative_path: str, patterns: IncludeExcludePatterns) -> bool:
        """Return True when the path conflicts with the rules and must be skipped.

        Args:
            relative_path: Repository-relative artifact path.
            patterns: The configured include/exclude rules.
        """
        if matches_any(relative_path, patterns.exclude):
            self._logger.debug("path_excluded", path=relative_path, exclude=list(patterns.exclude))
            return True

        if patterns.include and not matches_any(relative_path, patterns.include):
            self._logger.debug("path_not_included", path=relative_path, include=list(patterns.include))
            return True

        return False


def path_conflicts(relative_path: str, patterns: IncludeExcludePatterns) -> bool:
    """Module-level shortcut for ``PatternFilter().matches()``."""
    return PatternFilter().matches(relative_path, patterns)
