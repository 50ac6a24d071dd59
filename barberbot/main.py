import asyncio
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from barberbot.api.jobs import router as jobs_router
from barberbot.api.webhooks import router as webhooks_router
from barberbot.application.exceptions import RepositoryError
from barberbot.core.config import settings
from barberbot.infrastructure.store.database import init_models
from barberbot.infrastructure.whatsapp.gateway_platform import GatewayPlatform
from barberbot.wiring.dependencies import get_core, get_engine, get_messaging_platform


class ContextFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        extras = []
        for key in ("message_id", "requester_id", "step", "date", "time", "count", "reason", "error"):
            value = getattr(record, key, None)
            if value not in (None, ""):
                extras.append(f"{key}={value}")
        base = super().format(record)
        if extras:
            return f"{base} | " + " ".join(extras)
        return base


formatter = ContextFormatter("%(asctime)s %(levelname)s:%(name)s:%(message)s")
handler = logging.StreamHandler()
handler.setFormatter(formatter)

root = logging.getLogger()
root.setLevel(getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO))
root.handlers.clear()
root.addHandler(handler)

if settings.LOG_FILE:
    file_handler = logging.FileHandler(settings.LOG_FILE, encoding="utf-8")
    file_handler.setFormatter(formatter)
    root.addHandler(file_handler)

logger = logging.getLogger(__name__)


async def _sweep_forever(interval_seconds: float) -> None:
    sweep = get_core().sweep_idle_sessions
    while True:
        await asyncio.sleep(interval_seconds)
        try:
            await sweep.execute()
        except Exception as e:
            logger.exception("Idle session sweep failed", extra={"error": str(e)})


@asynccontextmanager
async def lifespan(app: FastAPI):
    if settings.REPOSITORY_PROVIDER.lower() != "memory":
        await init_models(get_engine())

    core = get_core()
    if settings.RUN_SAME_DAY_REMINDERS_ON_STARTUP:
        try:
            count = await core.reminders.run_same_day_reminders()
            logger.info("Startup reminders sent", extra={"count": count})
        except RepositoryError as e:
            logger.exception("Startup reminders failed", extra={"error": str(e)})

    sweeper = asyncio.create_task(_sweep_forever(settings.SWEEP_INTERVAL_SECONDS))
    logger.info("Barbershop bot started")
    try:
        yield
    finally:
        sweeper.cancel()
        platform = get_messaging_platform()
        if isinstance(platform, GatewayPlatform):
            await platform.aclose()
        if settings.REPOSITORY_PROVIDER.lower() != "memory":
            await get_engine().dispose()
        logger.info("Barbershop bot stopped")


app = FastAPI(title="Barbershop WhatsApp Scheduler", version="1.0.0", lifespan=lifespan)

app.include_router(webhooks_router, tags=["webhooks"])
app.include_router(jobs_router, tags=["jobs"])


@app.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok"}
