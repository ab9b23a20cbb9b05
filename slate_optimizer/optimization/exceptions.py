"""Custom exceptions for the lineup optimizer.

Exception types map onto the ways a batch run can go wrong:

1. Pool validation: the candidate pool cannot possibly fill a roster. Fatal,
   reported before any search work is done.
2. Configuration: the batch configuration itself is nonsensical.
3. Constraint infeasibility: one attempt could not place its locked or
   exposure-required candidates under the cap. Local to that attempt; the
   iteration controller discards the attempt and moves on.
4. Worker failure: the background process hosting the solver failed to start
   or died. This is an environment problem, not a constraint problem.

Running out of attempts before reaching the requested lineup count is not an
error. The batch is simply returned short.

Usage Examples:
- raise PoolValidationError("No eligible players for C")
- raise ConstraintInfeasibleError("Locked players cannot be placed under the cap")
"""


class PoolValidationError(ValueError):
    """Raised when the candidate pool cannot fill every roster slot.

    Common Scenarios:
    - Fewer candidates than roster slots after upstream filtering
    - A slot (e.g. C) with zero eligible candidates in the pool

    The solver never retries these; the caller has to relax its filters.

    Example:
    ```python
    if not any(eligible(c, "C") for c in pool):
        raise PoolValidationError("No eligible players for C after filters.")
    ```
    """

    def __init__(self, message: str, slot: str | None = None):
        super().__init__(message)
        self.slot = slot


class InvalidConfigError(ValueError):
    """Raised when the optimizer configuration is invalid.

    Common Scenarios:
    - Non-positive lineup count or salary cap
    - Exposure percentages outside 0-100
    - Non-positive search tunables
    """


class ConstraintInfeasibleError(ValueError):
    """Raised when a single attempt cannot place its required candidates.

    Covers both the locked set and the exposure must-include set. This error
    never escapes a batch run: it only ends the current attempt, which still
    counts against the attempt budget.
    """


class WorkerError(RuntimeError):
    """Raised when the background optimizer process fails.

    Indicates the host task could not be started or exited without sending a
    terminal message (crash, kill, import failure in the child).
    """
