"""
when(): compile boolean Python functions into host when-clauses.

The host evaluates visibility rules written in a tiny expression language
and cannot run extension code. when() bridges the two by *running* the
function, not reading its source:

    1. Run it with every predicate answering False (assignment 0).
    2. Each predicate read for the first time becomes a node of the
       decision tree, and the assignment that flips it is queued.
    3. Repeat until the queue is empty. Every reachable combination of
       discovered predicates is visited exactly once.
    4. Serialize the tree (see backends.when_clause).

Example:
    >>> when(lambda c: c["a"].equals(1) if c["b"].truthy() else c["a"].equals(2)).compile()
    'b && a == 1 || !b && a == 2'

IMPORTANT:
    The function must be pure and synchronous. It may read predicates in
    any order and any number of times, but its control flow may depend on
    nothing except the results of those reads.
"""

import logging
import threading
from collections import deque
from typing import Callable, Optional

from contributions.backends.when_clause import serialize_tree
from contributions.config import CompilerSettings, load_settings
from contributions.context_key import ContextAccessor
from contributions.errors import AccessorMisuseError
from contributions.model import DecisionTree

logger = logging.getLogger(__name__)

ExpressionFunction = Callable[[ContextAccessor], bool]


class WhenExpression:
    """
    A predicate function awaiting compilation.

    Compiling is repeatable and deterministic: the same pure function
    always yields byte-identical output. Nothing is shared between
    compiles; each one builds its own tree and worklist.

    One compile at a time per expression. A function that compiles its own
    expression from inside itself, or a second thread compiling the same
    expression, gets AccessorMisuseError.
    """

    def __init__(self, fn: ExpressionFunction, settings: Optional[CompilerSettings] = None):
        if not callable(fn):
            raise AccessorMisuseError(f"when() needs a callable, got {type(fn).__name__}")
        self.fn = fn
        self.settings = settings
        self._lock = threading.Lock()
        self.passes = 0

    def explore(self) -> DecisionTree:
        """
        Run the function until every branch of its decision tree is resolved.

        Returns:
            The finished DecisionTree

        Raises:
            NonDeterministicPredicateError, DepthExceededError,
            AccessorMisuseError, or anything the function itself raises
        """
        if not self._lock.acquire(blocking=False):
            raise AccessorMisuseError(
                "compile() is already running for this when() expression",
                details={"function": getattr(self.fn, "__qualname__", repr(self.fn))},
            )
        try:
            return self._explore()
        finally:
            self._lock.release()

    def _explore(self) -> DecisionTree:
        settings = self.settings or load_settings()
        tree = DecisionTree()
        queue = deque([0])
        passes = 0

        while queue:
            assignment = queue.popleft()
            accessor = ContextAccessor(tree, assignment, max_atoms=settings.max_atoms)
            try:
                result = bool(self.fn(accessor))
                accessor.resolve(result)
            finally:
                accessor.close()
            passes += 1

            for atom in accessor.discovered:
                queue.append(assignment | (1 << atom.depth))

            logger.debug(
                "Pass %d: assignment=%#x result=%s discovered=%s",
                passes, assignment, result, [a.text for a in accessor.discovered],
            )

        self.passes = passes
        return tree

    def compile(self) -> str:
        """Compile the function into a when-clause string."""
        tree = self.explore()
        clause = serialize_tree(tree)
        logger.debug(
            "Compiled %s in %d passes (%d atoms): %r",
            getattr(self.fn, "__qualname__", "expression"), self.passes, len(tree.atoms()), clause,
        )
        return clause

    def __str__(self) -> str:
        return self.compile()

    def __repr__(self) -> str:
        return f"WhenExpression({getattr(self.fn, '__qualname__', self.fn)!r})"


def when(fn: ExpressionFunction, settings: Optional[CompilerSettings] = None) -> WhenExpression:
    """Wrap a predicate function for compilation; see WhenExpression."""
    return WhenExpression(fn, settings=settings)


def compile_when(fn: ExpressionFunction, settings: Optional[CompilerSettings] = None) -> str:
    """Compile a predicate function in one step."""
    return when(fn, settings=settings).compile()
