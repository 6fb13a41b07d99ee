# landlord_hub/main.py
from __future__ import annotations

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .config import settings
from .logging_config import configure_logging

from .middleware.request_id import RequestIDMiddleware
from .middleware.structured_logging import StructuredLoggingMiddleware

from .routers.meta import router as meta_router
from .routers.dashboard import router as dashboard_router

from .routers.properties import router as properties_router
from .routers.tenants import router as tenants_router
from .routers.tradespeople import router as tradespeople_router
from .routers.maintenance import router as maintenance_router

from .routers.finance import router as finance_router
from .routers.reports import router as reports_router
from .routers.exports import router as exports_router

from .routers.documents import router as documents_router
from .routers.guidance import router as guidance_router

from .services.state_store import InvalidTransition

API_PREFIX = "/api"

configure_logging()


def _cors_origins() -> list[str]:
    val = getattr(settings, "cors_allow_origins", ["*"])
    if isinstance(val, str):
        v = val.strip()
        return ["*"] if v == "*" else [x.strip() for x in v.split(",") if x.strip()]
    if isinstance(val, list) and val:
        return val
    return ["*"]


app = FastAPI(
    title="Landlord Hub",
    version=settings.app_version,
)

app.add_middleware(StructuredLoggingMiddleware)
app.add_middleware(RequestIDMiddleware)

app.add_middleware(
    CORSMiddleware,
    allow_origins=_cors_origins(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(InvalidTransition)
async def invalid_transition_handler(request: Request, exc: InvalidTransition):
    return JSONResponse(status_code=409, content={"detail": str(exc)})


# Core
app.include_router(meta_router, prefix=API_PREFIX)
app.include_router(dashboard_router, prefix=API_PREFIX)

# Portfolio
app.include_router(properties_router, prefix=API_PREFIX)
app.include_router(tenants_router, prefix=API_PREFIX)
app.include_router(tradespeople_router, prefix=API_PREFIX)
app.include_router(maintenance_router, prefix=API_PREFIX)

# Money
app.include_router(finance_router, prefix=API_PREFIX)
app.include_router(reports_router, prefix=API_PREFIX)
app.include_router(exports_router, prefix=API_PREFIX)

# Documents + AI guidance
app.include_router(documents_router, prefix=API_PREFIX)
app.include_router(guidance_router, prefix=API_PREFIX)
