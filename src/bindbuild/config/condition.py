"""
Platform applicability conditions.

A condition is a small predicate tree over host facts. Registry entries carry
one so that a single crate can describe configurations for several hosts.

Variants:
    AlwaysTrue          - holds on every host
    Leaf(fact, value)   - holds when the named fact equals value
    Not(c)              - negation
    And(c, ...)         - all operands hold (empty And holds)
    Or(c, ...)          - any operand holds (empty Or does not hold)

JSON form (as stored in known_targets.json):
    true
    {"os": "linux"}
    {"os": "linux", "arch": "x86_64"}     (implicit And)
    {"not": {"os": "windows"}}
    {"all": [{"os": "linux"}, {"env": "gnu"}]}
    {"any": [{"os": "macos"}, {"os": "ios"}]}
"""

from dataclasses import dataclass
from typing import Any, Tuple, Union

from ..errors import BindBuildError
from ..platform_utils import FACT_NAMES, HostFacts


class ConditionError(BindBuildError):
    """Exception raised when a condition cannot be parsed."""

    pass


@dataclass(frozen=True)
class AlwaysTrue:
    pass


@dataclass(frozen=True)
class Leaf:
    fact: str
    expected: str

    def __post_init__(self):
        object.__setattr__(self, "expected", str(self.expected).lower())


@dataclass(frozen=True)
class Not:
    operand: "Condition"


@dataclass(frozen=True)
class And:
    operands: Tuple["Condition", ...]

    def __init__(self, *operands: "Condition"):
        object.__setattr__(self, "operands", tuple(operands))


@dataclass(frozen=True)
class Or:
    operands: Tuple["Condition", ...]

    def __init__(self, *operands: "Condition"):
        object.__setattr__(self, "operands", tuple(operands))


Condition = Union[AlwaysTrue, Leaf, Not, And, Or]

ALWAYS_TRUE = AlwaysTrue()


def evaluate(condition: Condition, facts: HostFacts) -> bool:
    """
    Evaluate a condition against a host fact snapshot.

    Total over every condition tree: facts that are not known read as
    "unknown", so a leaf on a missing fact is simply false.

    Args:
        condition: Condition tree
        facts: Host facts

    Returns:
        True if the condition holds on this host
    """
    if isinstance(condition, AlwaysTrue):
        return True
    if isinstance(condition, Leaf):
        return facts.get(condition.fact) == condition.expected
    if isinstance(condition, Not):
        return not evaluate(condition.operand, facts)
    if isinstance(condition, And):
        return all(evaluate(c, facts) for c in condition.operands)
    if isinstance(condition, Or):
        return any(evaluate(c, facts) for c in condition.operands)
    # Anything else is not a condition and never matches
    return False


def summarize(condition: Condition) -> str:
    """
    Render a condition as a short, stable, human-readable string.

    Example:
        And(Leaf("os", "linux"), Not(Leaf("env", "musl")))
        -> "os=linux && !(env=musl)"
    """
    if isinstance(condition, AlwaysTrue):
        return "any host"
    if isinstance(condition, Leaf):
        return f"{condition.fact}={condition.expected}"
    if isinstance(condition, Not):
        return f"!({summarize(condition.operand)})"
    if isinstance(condition, (And, Or)):
        if not condition.operands:
            return "any host" if isinstance(condition, And) else "no host"
        joiner = " && " if isinstance(condition, And) else " || "
        parts = []
        for operand in condition.operands:
            text = summarize(operand)
            if isinstance(operand, (And, Or)) and len(operand.operands) > 1:
                text = f"({text})"
            parts.append(text)
        return joiner.join(parts)
    return repr(condition)


def condition_from_data(data: Any) -> Condition:
    """
    Build a condition tree from its JSON form.

    Args:
        data: Decoded JSON value (bool or dict)

    Returns:
        Condition tree

    Raises:
        ConditionError: If the value is not a valid condition
    """
    if data is None or data is True:
        return ALWAYS_TRUE
    if data is False:
        return Not(ALWAYS_TRUE)
    if not isinstance(data, dict) or not data:
        raise ConditionError(f"Invalid condition: {data!r}")

    if "not" in data:
        if len(data) != 1:
            raise ConditionError(f"'not' must be the only key in a condition: {data!r}")
        return Not(condition_from_data(data["not"]))

    for key, combinator in (("all", And), ("any", Or)):
        if key in data:
            if len(data) != 1:
                raise ConditionError(f"'{key}' must be the only key in a condition: {data!r}")
            operands = data[key]
            if not isinstance(operands, list):
                raise ConditionError(f"'{key}' expects a list of conditions, got {operands!r}")
            return combinator(*(condition_from_data(item) for item in operands))

    leaves = []
    for fact, expected in data.items():
        if fact not in FACT_NAMES:
            raise ConditionError(
                f"Unknown host fact '{fact}'. Supported facts: {', '.join(FACT_NAMES)}"
            )
        leaves.append(Leaf(fact, expected))

    if len(leaves) == 1:
        return leaves[0]
    return And(*leaves)
