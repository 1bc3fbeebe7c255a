from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from merit_ems.api.routes import health
from merit_ems.core.config import settings
from merit_ems.core.logging import configure_logging, get_logger
from merit_ems.core.monitoring import configure_error_monitoring
from merit_ems.core.observability import configure_observability
from merit_ems.db.session import init_db
from merit_ems.domains.pay_periods.router import router as pay_periods_router
from merit_ems.domains.payroll.router import router as payroll_router
from merit_ems.domains.rewards.router import router as rewards_router
from merit_ems.domains.timeclock.router import router as timeclock_router

configure_logging(settings.log_level)
configure_observability()
configure_error_monitoring()
logger = get_logger(__name__)

app = FastAPI(title=settings.app_name)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origin_list or ["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(health.router)
app.include_router(timeclock_router)
app.include_router(pay_periods_router)
app.include_router(payroll_router)
app.include_router(rewards_router)


@app.on_event("startup")
def startup_event() -> None:
    if settings.create_schema_on_startup:
        init_db()
    logger.info("startup_complete", env=settings.env)


@app.get("/")
def root() -> dict[str, str]:
    return {"message": "MERIT EMS timeclock API running", "environment": settings.env}
