"""Module: reports."""

import logging

from fastapi import APIRouter, BackgroundTasks, Depends, Request

from app.api.v1.routes.deps import require_cron_secret

logger = logging.getLogger(__name__)

router = APIRouter(dependencies=[Depends(require_cron_secret)])


# Endpoint: compiles and sends the inventory summary in the background.
@router.get("/daily", summary="Send the daily inventory report")
def trigger_daily_report(request: Request, background_tasks: BackgroundTasks):
    logger.info("Daily report trigger accepted")
    background_tasks.add_task(request.app.state.reporter.send)
    return {"detail": "Daily report started in the background"}
