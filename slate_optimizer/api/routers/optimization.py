"""
Optimization API endpoints for DFS lineup generation.

Endpoints:
- /lineups: Generate a batch of unique lineups and return them with exposures
- /lineups/stream: Same batch, streamed as Server-Sent Events (one progress
  event per accepted lineup, then a terminal result or error event)

The streaming endpoint runs the solver in a background OptimizerWorker
process; if the client disconnects the worker is terminated.
"""

import json
import logging
from collections.abc import Iterator

from fastapi import APIRouter, HTTPException
from fastapi.responses import StreamingResponse

from slate_optimizer.api.schemas import ExposureOut, LineupOut, OptimizeRequest, OptimizeResponse
from slate_optimizer.optimization.exceptions import (
    InvalidConfigError,
    PoolValidationError,
    WorkerError,
)
from slate_optimizer.optimization.export import exposure_table
from slate_optimizer.optimization.lineup_builder import LineupBuilder
from slate_optimizer.optimization.worker import OptimizerRequest, OptimizerWorker

logger = logging.getLogger(__name__)

SSE_HEADERS = {
    "Cache-Control": "no-cache",
    "Connection": "keep-alive",
    "X-Accel-Buffering": "no",
}

router = APIRouter(prefix="/optimize", tags=["optimization"])


def sse_event(payload: dict) -> bytes:
    return f"event: {payload['type']}\ndata: {json.dumps(payload)}\n\n".encode()


def _to_request(request: OptimizeRequest) -> OptimizerRequest:
    try:
        config = request.config.to_config()
    except InvalidConfigError as e:
        raise HTTPException(status_code=422, detail=str(e)) from e
    return OptimizerRequest(players=[p.to_projection() for p in request.players], config=config)


@router.post("/lineups", response_model=OptimizeResponse)
def optimize_lineups(request: OptimizeRequest) -> OptimizeResponse:
    """
    Generate a portfolio of unique DraftKings NBA classic lineups.

    Returns fewer lineups than requested (with a message) when the attempt
    budget runs out first. Pool problems (too few players, an unfillable
    slot) are reported as 422.
    """
    optimizer_request = _to_request(request)
    builder = LineupBuilder(optimizer_request.config)
    try:
        result = builder.generate_lineups(optimizer_request.players)
    except PoolValidationError as e:
        raise HTTPException(status_code=422, detail=str(e)) from e

    message = None
    if not result.lineups:
        message = "No valid lineups could be generated with the current pool and settings."
    elif not result.is_complete:
        message = f"Only {len(result.lineups)} of {result.requested} lineups could be generated."

    exposures = exposure_table(result.lineups, optimizer_request.players)
    return OptimizeResponse(
        lineups=[LineupOut.from_lineup(lineup) for lineup in result.lineups],
        requested=result.requested,
        attempts=result.attempts,
        complete=result.is_complete,
        message=message,
        exposures=[
            ExposureOut(
                player_id=str(row["player_id"]),
                name=str(row["name"]),
                count=int(row["count"]),
                exposure=float(row["exposure"]),
            )
            for row in exposures.to_dict("records")
        ],
    )


@router.post("/lineups/stream")
def optimize_lineups_stream(request: OptimizeRequest) -> StreamingResponse:
    """Stream batch progress as Server-Sent Events."""
    optimizer_request = _to_request(request)
    worker = OptimizerWorker(optimizer_request)
    try:
        worker.start()
    except WorkerError as e:
        logger.exception("Failed to start optimizer worker")
        worker.close()
        raise HTTPException(status_code=500, detail=str(e)) from e

    def gen() -> Iterator[bytes]:
        try:
            for message in worker.messages():
                yield sse_event(message.to_dict())
        finally:
            worker.close()

    return StreamingResponse(gen(), media_type="text/event-stream", headers=SSE_HEADERS)
