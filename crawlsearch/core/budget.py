"""Per-run crawl budgets."""
from __future__ import annotations

ITERATION_CEILING = 2500  # max traversal calls for one fqdn
ERROR_CEILING = 100  # max tolerated failures for one fqdn


def budget_exhausted(iterations: int, errors: int) -> bool:
    return errors >= ERROR_CEILING or iterations >= ITERATION_CEILING


def should_continue(iterations: int, errors: int, already_visited: bool) -> bool:
    return errors < ERROR_CEILING and iterations < ITERATION_CEILING and not already_visited
