"""
Context keys and the accessor handed to when() predicate functions.

A predicate function never sees real context values. It receives a
ContextAccessor, and every test it performs (equals, matches, truthy) is
intercepted:

    when(lambda c: c["view"].equals("explorer") and c["editorFocus"].truthy())

Each test is mapped to a position in the shared DecisionTree and answered
from the bit of the current assignment that belongs to that position. The
compiler driver runs the function once per assignment and reads the tree
afterwards.

ARCHITECTURAL RULE:
    An accessor is bound to exactly one pass of one compile. There is no
    module-level "active accessor"; a function that stashes its accessor
    and uses it later gets AccessorMisuseError.
"""

import logging
import re
from typing import Any, List, Optional, Union

from .config import DEFAULT_MAX_ATOMS
from .errors import AccessorMisuseError, DepthExceededError, NonDeterministicPredicateError
from .host import HostApi
from .model import Atom, Branch, DecisionNode, DecisionTree

logger = logging.getLogger(__name__)

PatternLike = Union[str, "re.Pattern[str]"]


def render_value(value: Any) -> str:
    """Render an equality operand the way the host's rule evaluator reads it."""
    if value is True:
        return "true"
    if value is False:
        return "false"
    if value is None:
        return "null"
    return str(value)


def render_pattern(pattern: PatternLike) -> str:
    """Raw pattern source, without delimiters or flags."""
    if isinstance(pattern, re.Pattern):
        return pattern.pattern
    return str(pattern)


def _key_name(key: Any) -> str:
    if isinstance(key, ContextKey):
        return key.key
    if isinstance(key, str):
        if not key:
            # an empty atom would serialize as an unconditional clause
            raise AccessorMisuseError("Context keys must be non-empty strings", details={"key": repr(key)})
        return key
    raise AccessorMisuseError(
        f"Can only use context key strings, got {type(key).__name__}",
        details={"key": repr(key)},
    )


class ContextComparator:
    """The three tests available on one context key."""

    __slots__ = ("_accessor", "key")

    def __init__(self, accessor: "ContextAccessor", key: str):
        self._accessor = accessor
        self.key = key

    def equals(self, value: Any) -> bool:
        return self._accessor.evaluate(f"{self.key} == {self._operand(render_value(value))}", self.key)

    def matches(self, pattern: PatternLike) -> bool:
        return self._accessor.evaluate(f"{self.key} ~= {self._operand(render_pattern(pattern))}", self.key)

    def _operand(self, rendered: str) -> str:
        # the clause grammar has no quoting, so an empty operand cannot be written
        if not rendered:
            raise AccessorMisuseError(
                f"Cannot compare {self.key!r} against an empty value",
                details={"key": self.key},
            )
        return rendered

    def truthy(self) -> bool:
        return self._accessor.evaluate(self.key, self.key)

    def __repr__(self) -> str:
        return f"ContextComparator({self.key!r})"


class ContextAccessor:
    """
    Intercepts predicate reads for one execution of a predicate function.

    Args:
        tree: DecisionTree shared by every pass of the compile
        assignment: Bit set; bit N answers the test discovered at depth N
        max_atoms: Deepest position a test may occupy

    The cursor starts at the tree root with a previous result of True, so
    the first test always lands on the root's true branch.
    """

    def __init__(self, tree: DecisionTree, assignment: int, max_atoms: int = DEFAULT_MAX_ATOMS):
        self._tree = tree
        self._assignment = assignment
        self._max_atoms = max_atoms
        self._cursor: DecisionNode = tree.root
        self._last_result = True
        self._active = True
        self.discovered: List[Atom] = []

    @property
    def assignment(self) -> int:
        return self._assignment

    @property
    def active(self) -> bool:
        return self._active

    def get(self, key: Union[str, "ContextKey"]) -> ContextComparator:
        """Return the comparator for ``key``; a ContextKey is accepted in place of its name."""
        return ContextComparator(self, _key_name(key))

    def __getitem__(self, key: Union[str, "ContextKey"]) -> ContextComparator:
        return self.get(key)

    def evaluate(self, text: str, key: str = "") -> bool:
        """
        Record one predicate test and return its forced outcome.

        Raises:
            AccessorMisuseError: If the pass this accessor belongs to is over
            DepthExceededError: If the test would sit deeper than max_atoms
            NonDeterministicPredicateError: If this position was previously
                reached with a different test, or was a place the function
                returned
        """
        if not self._active:
            raise AccessorMisuseError(
                "Context tests may only be used inside the when() function that received them",
                details={"atom": text},
            )

        node = self._cursor
        outcome = self._last_result
        following = node.branch(outcome)

        if following is Branch.UNRESOLVED:
            depth = node.depth + 1
            if depth > self._max_atoms:
                raise DepthExceededError(
                    f"When expressions may read at most {self._max_atoms} predicates "
                    f"along one path, {text!r} would be number {depth}",
                    details={"atom": text, "depth": depth, "max_atoms": self._max_atoms},
                )
            following = DecisionNode(Atom(text, depth, key))
            node.set_branch(outcome, following)
            self.discovered.append(following.atom)
        elif not isinstance(following, DecisionNode):
            raise NonDeterministicPredicateError(
                f"When expression is non-deterministic: {text!r} was read at a position "
                f"where a previous run returned {following}",
                details={"atom": text, "depth": node.depth + 1},
            )
        elif following.atom.text != text:
            raise NonDeterministicPredicateError(
                f"When expression is non-deterministic: read {text!r} where a previous run "
                f"read {following.atom.text!r}",
                details={"atom": text, "expected": following.atom.text, "depth": following.depth},
            )

        self._cursor = following
        self._last_result = bool((self._assignment >> following.depth) & 1)
        return self._last_result

    def resolve(self, result: bool) -> None:
        """
        Store the function's result at the position this pass ended on.

        Raises:
            NonDeterministicPredicateError: If the position already holds a
                different result or a further predicate
        """
        node = self._cursor
        outcome = self._last_result
        existing = node.branch(outcome)

        if existing is Branch.UNRESOLVED:
            node.set_branch(outcome, result)
        elif isinstance(existing, DecisionNode):
            raise NonDeterministicPredicateError(
                f"When expression is non-deterministic: returned where a previous run "
                f"went on to read {existing.atom.text!r}",
                details={"atom": existing.atom.text, "depth": existing.depth},
            )
        elif existing != result:
            raise NonDeterministicPredicateError(
                f"When expression is non-deterministic: returned {result} where a previous "
                f"run returned {existing}",
                details={"atom": node.atom.text, "depth": node.depth},
            )

    def close(self) -> None:
        self._active = False


class ContextKey:
    """
    A named context key whose value the extension tracks.

    Assigning ``value`` forwards the change to the host with the
    ``setContext`` command, so when-clauses that read the key re-evaluate.
    Assigning the current value again is a no-op.

    Inside a when() function a ContextKey can be used in place of its name:

        hello = contributions.context_key("hello")
        when(lambda c: c[hello].equals("world"))
    """

    def __init__(self, api: HostApi, key: str):
        if not isinstance(key, str) or not key:
            raise AccessorMisuseError("Context keys must be non-empty strings", details={"key": repr(key)})
        self._api = api
        self.key = key
        self._value: Optional[Any] = None

    @property
    def value(self) -> Optional[Any]:
        return self._value

    @value.setter
    def value(self, value: Optional[Any]) -> None:
        # 1 and True compare equal but reach the host as different values
        if type(value) is not type(self._value) or value != self._value:
            self._api.get().commands.execute_command("setContext", self.key, value)
            logger.debug("Context key %s set to %r", self.key, value)
            self._value = value

    def set(self, value: Optional[Any]) -> None:
        self.value = value

    def __str__(self) -> str:
        return self.key

    def __repr__(self) -> str:
        return f"ContextKey({self.key!r})"
