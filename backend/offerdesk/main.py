import logging
from contextlib import asynccontextmanager
from logging.handlers import RotatingFileHandler
from pathlib import Path

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from offerdesk.config import settings

# ─── Logging setup (file + console) ───
_LOG_DIR = Path(settings.log_dir)
_LOG_DIR.mkdir(parents=True, exist_ok=True)

_log_level = getattr(logging, settings.log_level.upper(), logging.INFO)

logging.basicConfig(
    level=_log_level,
    format="%(asctime)s %(levelname)-8s [%(name)s] %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
    handlers=[
        logging.StreamHandler(),
        RotatingFileHandler(
            _LOG_DIR / "offerdesk.log",
            maxBytes=10 * 1024 * 1024,  # 10 MB
            backupCount=5,
            encoding="utf-8",
        ),
    ],
)

# Quiet noisy libraries
logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)

from offerdesk.exception_handlers import register_exception_handlers
from offerdesk.routers import (
    agents,
    air_ancillaries,
    audit_logs,
    bundles,
    campaigns,
    channel_overrides,
    cohorts,
    dynamic_discounts,
    negofares,
    nonair,
    offer,
    offer_rules,
    tiers,
)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Seed default tiers and a demo agent if the DB is empty (dev convenience)
    if settings.seed_on_startup:
        try:
            from offerdesk.seed import seed
            await seed()
        except Exception as e:
            logger.warning(f"Auto-seed skipped: {e}")

    yield

    from offerdesk.database import engine
    await engine.dispose()
    logger.info("Database engine disposed")


app = FastAPI(
    title="OfferDesk",
    description="Airline offer management and pricing platform",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origin_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)

app.include_router(negofares.router, prefix="/api/negofares", tags=["negotiated-fares"])
app.include_router(dynamic_discounts.router, prefix="/api/dynamic-discount-rules", tags=["dynamic-discounts"])
app.include_router(air_ancillaries.router, prefix="/api/air-ancillary-rules", tags=["air-ancillaries"])
app.include_router(nonair.router, prefix="/api/nonair", tags=["non-air"])
app.include_router(bundles.router, prefix="/api/bundles", tags=["bundles"])
app.include_router(offer_rules.router, prefix="/api/offer-rules", tags=["offer-rules"])
app.include_router(channel_overrides.router, prefix="/api/channel-overrides", tags=["channel-overrides"])
app.include_router(agents.router, prefix="/api/agents", tags=["agents"])
app.include_router(cohorts.router, prefix="/api/cohorts", tags=["cohorts"])
app.include_router(tiers.router, prefix="/api/tiers", tags=["tiers"])
app.include_router(campaigns.router, prefix="/api/campaigns", tags=["campaigns"])
app.include_router(offer.router, prefix="/api/offer", tags=["offer"])
app.include_router(audit_logs.router, prefix="/api/audit-logs", tags=["audit"])


@app.get("/api/health")
async def health_check():
    return {"status": "ok", "service": "offerdesk"}
