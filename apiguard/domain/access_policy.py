"""Access policy gate: environment-keyed authorization plan for path groups.

The plan is an ordered tuple of (path pattern, decision); the first matching
rule wins. The gate only computes the plan; enforcement belongs to the
transport layer (see infrastructure/security).
"""
from __future__ import annotations

import threading
from dataclasses import dataclass
from enum import Enum

from apiguard.constants import Environment, Paths, Role


class DecisionKind(str, Enum):
    DENY_ALL = "DENY_ALL"
    REQUIRE_ROLE = "REQUIRE_ROLE"
    PERMIT_ALL = "PERMIT_ALL"
    REQUIRE_AUTH = "REQUIRE_AUTH"


@dataclass(frozen=True)
class Decision:
    kind: DecisionKind
    role: str | None = None

    def __post_init__(self) -> None:
        if (self.kind == DecisionKind.REQUIRE_ROLE) != (self.role is not None):
            raise ValueError("role is required for REQUIRE_ROLE and only for it")

    def __str__(self) -> str:
        if self.kind == DecisionKind.REQUIRE_ROLE:
            return f"REQUIRE_ROLE({self.role})"
        return self.kind.value


DENY_ALL = Decision(DecisionKind.DENY_ALL)
PERMIT_ALL = Decision(DecisionKind.PERMIT_ALL)
REQUIRE_AUTH = Decision(DecisionKind.REQUIRE_AUTH)


def require_role(role: str) -> Decision:
    return Decision(DecisionKind.REQUIRE_ROLE, role)


@dataclass(frozen=True)
class PolicyRule:
    path_pattern: str
    decision: Decision

    def matches(self, path: str) -> bool:
        return path_matches(self.path_pattern, path)


def path_matches(pattern: str, path: str) -> bool:
    """Literal match, or prefix match for patterns ending in ``/**``."""
    if pattern.endswith("/**"):
        prefix = pattern[:-3]
        return path == prefix or path.startswith(prefix + "/") or prefix == ""
    return path == pattern


DIAGNOSTIC_PATHS = (
    Paths.ACTUATOR_HEALTH,
    Paths.ACTUATOR_INFO,
    Paths.HEALTH,
    Paths.HEALTH_VERSION,
    Paths.HEALTH_LIVE,
    Paths.HEALTH_READY,
)
DOCS_PATTERNS = (*Paths.DOCS_UI, "/docs/**", Paths.DOCS_JSON)
INVENTORY_PATTERNS = (Paths.INVENTORY, Paths.INVENTORY + "/**")
RESOURCE_PATTERNS = (Paths.USERS, Paths.USERS + "/**", Paths.QUALITY_TESTS, Paths.QUALITY_TESTS + "/**")
ADMIN_PATTERNS = ("/actuator/**", "/admin/**")
CATCH_ALL = "/**"


def authorization_plan(environment: Environment) -> tuple[PolicyRule, ...]:
    rules: list[PolicyRule] = [PolicyRule(p, PERMIT_ALL) for p in DIAGNOSTIC_PATHS]

    if environment.is_production:
        rules += [PolicyRule(p, DENY_ALL) for p in DOCS_PATTERNS]
        rules += [PolicyRule(p, DENY_ALL) for p in INVENTORY_PATTERNS]
        rules.append(PolicyRule(Paths.HEALTH_SECURITY, DENY_ALL))
    else:
        admin = require_role(Role.ADMIN)
        rules += [PolicyRule(p, PERMIT_ALL) for p in DOCS_PATTERNS]
        rules += [PolicyRule(p, admin) for p in INVENTORY_PATTERNS]
        rules.append(PolicyRule(Paths.HEALTH_SECURITY, admin))

    rules += [PolicyRule(p, REQUIRE_AUTH) for p in RESOURCE_PATTERNS]
    rules += [PolicyRule(p, require_role(Role.ADMIN)) for p in ADMIN_PATTERNS]
    rules.append(PolicyRule(CATCH_ALL, REQUIRE_AUTH))
    return tuple(rules)


def decision_for(plan: tuple[PolicyRule, ...], path: str) -> Decision:
    for rule in plan:
        if rule.matches(path):
            return rule.decision
    return REQUIRE_AUTH


class AccessPolicyHolder:
    """Publishes the current plan. Reload builds a new tuple, then swaps the reference."""

    def __init__(self, environment: Environment) -> None:
        self._lock = threading.Lock()
        self._published = (environment, authorization_plan(environment))

    @property
    def published(self) -> tuple[Environment, tuple[PolicyRule, ...]]:
        """The current (environment, plan) pair, read in one step."""
        return self._published

    @property
    def environment(self) -> Environment:
        return self._published[0]

    @property
    def plan(self) -> tuple[PolicyRule, ...]:
        return self._published[1]

    def decision_for(self, path: str) -> Decision:
        return decision_for(self._published[1], path)

    def reload(self, environment: Environment) -> None:
        published = (environment, authorization_plan(environment))
        with self._lock:
            self._published = published
