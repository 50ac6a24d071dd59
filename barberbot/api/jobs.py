from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Header, HTTPException

from barberbot.application.dto.webhook_event import JobResultDTO
from barberbot.application.exceptions import RepositoryError
from barberbot.application.use_cases.reminders import ReminderUseCase
from barberbot.core.config import settings
from barberbot.infrastructure.whatsapp.webhook_verify import verify_jobs_token
from barberbot.wiring.dependencies import get_reminder_use_case


router = APIRouter(prefix="/jobs")
logger = logging.getLogger(__name__)


def require_jobs_token(x_jobs_token: str | None = Header(None)) -> None:
    if not verify_jobs_token(x_jobs_token, settings.JOBS_API_TOKEN, settings.ENV):
        raise HTTPException(status_code=403, detail="Invalid jobs token")


@router.post("/same-day-reminders", response_model=JobResultDTO, dependencies=[Depends(require_jobs_token)])
async def same_day_reminders(reminders: ReminderUseCase = Depends(get_reminder_use_case)) -> JobResultDTO:
    return await _run("same-day-reminders", reminders.run_same_day_reminders)


@router.post("/next-day-reminders", response_model=JobResultDTO, dependencies=[Depends(require_jobs_token)])
async def next_day_reminders(reminders: ReminderUseCase = Depends(get_reminder_use_case)) -> JobResultDTO:
    return await _run("next-day-reminders", reminders.run_next_day_reminders)


@router.post("/retention-sweep", response_model=JobResultDTO, dependencies=[Depends(require_jobs_token)])
async def retention_sweep(reminders: ReminderUseCase = Depends(get_reminder_use_case)) -> JobResultDTO:
    return await _run("retention-sweep", reminders.run_retention_sweep)


async def _run(job: str, action) -> JobResultDTO:
    try:
        count = await action()
    except RepositoryError as e:
        logger.exception("Job failed", extra={"reason": job, "error": str(e)})
        raise HTTPException(status_code=503, detail="Appointment store unavailable")
    logger.info("Job finished", extra={"reason": job, "count": count})
    return JobResultDTO(job=job, count=count)
