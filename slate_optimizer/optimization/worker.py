"""Background execution of a batch run behind a message boundary.

A caller hands over one OptimizerRequest and receives a stream of messages:

- ProgressMessage after every accepted (unique) lineup
- ResultMessage once the batch ends, possibly with fewer lineups than asked
- ErrorMessage instead of a result when the pool or configuration is
  rejected, the solver fails unexpectedly, or the host process dies

``iter_messages`` produces that stream synchronously in the current process.
OptimizerWorker runs the same generator in a separate process and relays the
messages through a queue, so the solver never shares memory with the caller
and can be terminated at any moment. Each attempt is build-or-discard, so
termination never leaves partial state behind.
"""

import logging
import math
import multiprocessing as mp
import queue
from collections.abc import Iterator
from dataclasses import dataclass, field
from typing import Any, Literal

from ..config.settings import settings
from .exceptions import InvalidConfigError, PoolValidationError, WorkerError
from .lineup_builder import LineupBuilder
from .models import Lineup, OptimizerConfig, PlayerProjection

logger = logging.getLogger(__name__)

WORKER_START_FAILURE = "Worker Error: Optimization failed to start."
POLL_INTERVAL = 0.1


@dataclass
class OptimizerRequest:
    players: list[PlayerProjection]
    config: OptimizerConfig = field(default_factory=OptimizerConfig)


@dataclass
class ProgressMessage:
    percent: int
    lineups_found: int
    current_best: Lineup
    type: Literal["progress"] = "progress"

    def to_dict(self) -> dict[str, Any]:
        return {
            "type": self.type,
            "percent": self.percent,
            "lineups_found": self.lineups_found,
            "current_best": self.current_best.to_dict(),
        }


@dataclass
class ResultMessage:
    lineups: list[Lineup]
    attempts: int = 0
    type: Literal["result"] = "result"

    def to_dict(self) -> dict[str, Any]:
        return {
            "type": self.type,
            "lineups": [lineup.to_dict() for lineup in self.lineups],
            "attempts": self.attempts,
        }


@dataclass
class ErrorMessage:
    message: str
    kind: Literal["validation", "config", "worker"] = "validation"
    type: Literal["error"] = "error"

    def to_dict(self) -> dict[str, Any]:
        return {"type": self.type, "message": self.message, "kind": self.kind}


Message = ProgressMessage | ResultMessage | ErrorMessage


def progress_percent(found: int, target: int) -> int:
    """Completion percentage, rounding halves up."""
    return math.floor(found / target * 100 + 0.5)


def iter_messages(request: OptimizerRequest) -> Iterator[Message]:
    """Run a batch and yield its message stream; the last message is terminal."""
    builder = LineupBuilder(request.config)
    target = request.config.num_lineups
    lineups: list[Lineup] = []
    try:
        for lineup in builder.iter_lineups(request.players):
            lineups.append(lineup)
            yield ProgressMessage(
                percent=progress_percent(len(lineups), target),
                lineups_found=len(lineups),
                current_best=lineup,
            )
    except PoolValidationError as e:
        logger.warning(f"Optimization rejected: {e}")
        yield ErrorMessage(str(e))
        return
    except InvalidConfigError as e:
        logger.warning(f"Optimization rejected: {e}")
        yield ErrorMessage(str(e), kind="config")
        return
    except Exception as e:
        logger.exception("Optimization failed")
        yield ErrorMessage(f"Unknown optimization error: {e}", kind="worker")
        return
    yield ResultMessage(lineups=lineups, attempts=builder.attempts)


def _run_worker(request: OptimizerRequest, channel: Any) -> None:
    """Child process entry point."""
    try:
        for message in iter_messages(request):
            channel.put(message)
    except Exception as e:  # pragma: no cover - surfaced to the parent as a message
        channel.put(ErrorMessage(f"Unknown optimization error: {e}", kind="worker"))


class OptimizerWorker:
    """Runs one batch in a background process.

    Example:
    ```python
    with OptimizerWorker(OptimizerRequest(players, config)) as worker:
        for message in worker.messages():
            ...
    ```
    """

    def __init__(self, request: OptimizerRequest, start_method: str | None = None):
        self.request = request
        self._ctx = mp.get_context(start_method or settings.worker_start_method)
        self._channel = self._ctx.Queue()
        self._process = None

    def start(self) -> "OptimizerWorker":
        if self._process is not None:
            raise WorkerError("Worker already started")
        try:
            self._process = self._ctx.Process(
                target=_run_worker, args=(self.request, self._channel), daemon=True
            )
            self._process.start()
        except (OSError, ValueError) as e:
            self._process = None
            raise WorkerError(f"{WORKER_START_FAILURE} {e}") from e
        logger.debug(f"Optimizer worker started (pid {self._process.pid})")
        return self

    @property
    def is_alive(self) -> bool:
        return self._process is not None and self._process.is_alive()

    def messages(self) -> Iterator[Message]:
        """Yield messages until a terminal one arrives.

        A process that exits without sending a terminal message produces an
        ErrorMessage instead.
        """
        if self._process is None:
            self.start()
        while True:
            try:
                message = self._channel.get(timeout=POLL_INTERVAL)
            except queue.Empty:
                if self._process.is_alive():
                    continue
                # Drain anything sent just before exit
                try:
                    message = self._channel.get(timeout=POLL_INTERVAL)
                except queue.Empty:
                    exitcode = self._process.exitcode
                    logger.error(f"Optimizer worker exited without a result (exit code {exitcode})")
                    yield ErrorMessage(f"{WORKER_START_FAILURE} Exit code {exitcode}.", kind="worker")
                    return
            yield message
            if not isinstance(message, ProgressMessage):
                self.join()
                return

    def run(self) -> list[Lineup]:
        """Block until the batch ends and return its lineups.

        Raises:
            PoolValidationError: The pool was rejected
            InvalidConfigError: The configuration was rejected
            WorkerError: The background process failed
        """
        for message in self.messages():
            if isinstance(message, ResultMessage):
                return message.lineups
            if isinstance(message, ErrorMessage):
                if message.kind == "config":
                    raise InvalidConfigError(message.message)
                if message.kind == "worker":
                    raise WorkerError(message.message)
                raise PoolValidationError(message.message)
        raise WorkerError(WORKER_START_FAILURE)

    def join(self, timeout: float | None = 5.0) -> None:
        if self._process is not None:
            self._process.join(timeout)

    def terminate(self) -> None:
        """Stop the background process; safe to call at any time."""
        if self._process is not None and self._process.is_alive():
            self._process.terminate()
            self._process.join()
            logger.info("Optimizer worker terminated")

    def __enter__(self) -> "OptimizerWorker":
        return self.start()

    def close(self) -> None:
        """Terminate the process and release the message queue."""
        self.terminate()
        self._channel.close()

    def __exit__(self, *exc_info) -> None:
        self.close()
