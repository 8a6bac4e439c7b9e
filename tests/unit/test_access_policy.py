import threading

import pytest

from apiguard.constants import Environment, Role
from apiguard.domain.access_policy import (
    CATCH_ALL,
    DENY_ALL,
    DIAGNOSTIC_PATHS,
    PERMIT_ALL,
    REQUIRE_AUTH,
    AccessPolicyHolder,
    Decision,
    DecisionKind,
    authorization_plan,
    decision_for,
    path_matches,
    require_role,
)

ADMIN = require_role(Role.ADMIN)


@pytest.mark.parametrize(
    "pattern,path,expected",
    [
        ("/inventory", "/inventory", True),
        ("/inventory", "/inventory/active", False),
        ("/inventory/**", "/inventory/active", True),
        ("/inventory/**", "/inventory", True),
        ("/inventory/**", "/inventoryx", False),
        ("/**", "/anything/at/all", True),
    ],
)
def test_path_matches(pattern, path, expected):
    assert path_matches(pattern, path) is expected


@pytest.mark.parametrize("path", ["/docs", "/docs/oauth2-redirect", "/redoc", "/openapi.json", "/inventory", "/inventory/high-risk", "/health/security"])
def test_production_denies_docs_inventory_and_security_detail(path):
    plan = authorization_plan(Environment.PRODUCTION)
    assert decision_for(plan, path) == DENY_ALL


@pytest.mark.parametrize("environment", [Environment.DEVELOPMENT, Environment.STAGING])
def test_non_production_opens_docs_and_gates_inventory_by_admin(environment):
    plan = authorization_plan(environment)
    assert decision_for(plan, "/docs") == PERMIT_ALL
    assert decision_for(plan, "/openapi.json") == PERMIT_ALL
    assert decision_for(plan, "/inventory") == ADMIN
    assert decision_for(plan, "/inventory/health") == ADMIN
    assert decision_for(plan, "/health/security") == ADMIN


@pytest.mark.parametrize("environment", list(Environment))
@pytest.mark.parametrize("path", DIAGNOSTIC_PATHS)
def test_diagnostics_are_always_permitted(environment, path):
    plan = authorization_plan(environment)
    assert decision_for(plan, path) == PERMIT_ALL
    assert all(
        rule.decision != DENY_ALL for rule in plan if rule.path_pattern in DIAGNOSTIC_PATHS
    )


@pytest.mark.parametrize("environment", list(Environment))
def test_resources_admin_paths_and_catch_all(environment):
    plan = authorization_plan(environment)
    assert decision_for(plan, "/api/v2/users") == REQUIRE_AUTH
    assert decision_for(plan, "/api/v2/qualitytests/7") == REQUIRE_AUTH
    assert decision_for(plan, "/actuator/metrics") == ADMIN
    assert decision_for(plan, "/admin/jobs") == ADMIN
    assert decision_for(plan, "/legacy/old-endpoint") == REQUIRE_AUTH


def test_actuator_health_is_permitted_before_actuator_admin_rule():
    plan = authorization_plan(Environment.PRODUCTION)
    assert decision_for(plan, "/actuator/health") == PERMIT_ALL
    assert decision_for(plan, "/actuator/env") == ADMIN


def test_catch_all_is_last_and_never_open():
    for environment in Environment:
        plan = authorization_plan(environment)
        assert plan[-1].path_pattern == CATCH_ALL
        assert plan[-1].decision == REQUIRE_AUTH


def test_plan_is_deterministic():
    assert authorization_plan(Environment.STAGING) == authorization_plan(Environment.STAGING)


def test_decision_requires_role_only_for_require_role():
    with pytest.raises(ValueError):
        Decision(DecisionKind.REQUIRE_ROLE)
    with pytest.raises(ValueError):
        Decision(DecisionKind.PERMIT_ALL, "ADMIN")
    assert str(ADMIN) == "REQUIRE_ROLE(ADMIN)"
    assert str(DENY_ALL) == "DENY_ALL"


def test_holder_reload_publishes_new_plan():
    holder = AccessPolicyHolder(Environment.DEVELOPMENT)
    assert holder.decision_for("/inventory") == ADMIN

    holder.reload(Environment.PRODUCTION)
    assert holder.environment == Environment.PRODUCTION
    assert holder.plan == authorization_plan(Environment.PRODUCTION)
    assert holder.decision_for("/inventory") == DENY_ALL


def test_holder_readers_only_see_complete_plans():
    holder = AccessPolicyHolder(Environment.DEVELOPMENT)
    valid = {authorization_plan(env) for env in Environment}
    seen_invalid = []

    def writer() -> None:
        for i in range(200):
            holder.reload(list(Environment)[i % 3])

    def reader() -> None:
        for _ in range(500):
            if holder.plan not in valid:
                seen_invalid.append(holder.plan)

    threads = [threading.Thread(target=writer)] + [threading.Thread(target=reader) for _ in range(3)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()
    assert seen_invalid == []


def test_holder_published_pairs_environment_with_its_plan():
    holder = AccessPolicyHolder(Environment.DEVELOPMENT)
    mismatched = []

    def writer() -> None:
        for i in range(200):
            holder.reload(list(Environment)[i % 3])

    def reader() -> None:
        for _ in range(500):
            environment, plan = holder.published
            if plan != authorization_plan(environment):
                mismatched.append(environment)

    threads = [threading.Thread(target=writer)] + [threading.Thread(target=reader) for _ in range(3)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()
    assert mismatched == []

    holder.reload(Environment.STAGING)
    assert holder.published == (Environment.STAGING, authorization_plan(Environment.STAGING))
