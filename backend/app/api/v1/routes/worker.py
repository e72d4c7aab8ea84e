"""Module: worker."""

import logging

from fastapi import APIRouter, BackgroundTasks, Depends, Request

from app.api.v1.routes.deps import require_cron_secret

logger = logging.getLogger(__name__)

router = APIRouter(dependencies=[Depends(require_cron_secret)])


# Endpoint: called once a minute by the external scheduler. Answers right away;
# the tick itself runs as a background task after the response is sent.
@router.get("/trigger", summary="Start one stock tick")
def trigger_worker(request: Request, background_tasks: BackgroundTasks):
    logger.info("Worker trigger accepted")
    background_tasks.add_task(request.app.state.worker.run_tick)
    return {"detail": "Stock tick started in the background"}
