# ywd_admin/main.py
import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from tortoise.exceptions import BaseORMException

from ywd_admin.config import settings
from ywd_admin.core.bootstrap import ensure_default_admin, seed_reference_data
from ywd_admin.core.errors import AppError, GatewayError, QueryError, ValidationError
from ywd_admin.core.gateway import GraphGateway

from ywd_admin.api.v1.routers import auth, users, cadets, instructors, plans, chats, calendar

logger = logging.getLogger("uvicorn.error")

app = FastAPI(title=settings.APP_NAME)
app.state.gateway = GraphGateway()

# CORS (with Cookie)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError):
    if isinstance(exc, GatewayError):
        logger.error("[api] %s %s -> %s", request.method, request.url.path, exc.code, exc_info=exc)
    return JSONResponse(exc.to_payload(), status_code=exc.status_code)


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    err = ValidationError(details=jsonable_errors(exc))
    return JSONResponse(err.to_payload(), status_code=err.status_code)


@app.exception_handler(BaseORMException)
async def orm_error_handler(request: Request, exc: BaseORMException):
    logger.exception("[api] %s %s: unhandled ORM error", request.method, request.url.path)
    err = QueryError()
    return JSONResponse(err.to_payload(), status_code=err.status_code)


def jsonable_errors(exc: RequestValidationError) -> list[dict]:
    """Field locations and messages only; raw input is not echoed back."""
    return [{"loc": list(e.get("loc", ())), "msg": e.get("msg", "")} for e in exc.errors()]


@app.on_event("startup")
async def on_startup():
    gw: GraphGateway = app.state.gateway
    await gw.ensure_connected()
    # Roles, transmissions and event types must exist before anything else
    await seed_reference_data(gw)
    # Ensure there's a default admin account on first run
    await ensure_default_admin(gw)


@app.on_event("shutdown")
async def on_shutdown():
    await app.state.gateway.close()


# REST
app.include_router(auth.router, prefix="/api")
app.include_router(users.router, prefix="/api")
app.include_router(cadets.router, prefix="/api")
app.include_router(instructors.router, prefix="/api")
app.include_router(plans.router, prefix="/api")
app.include_router(chats.router, prefix="/api")
app.include_router(calendar.router, prefix="/api")


@app.get("/healthz")
async def healthz():
    try:
        await app.state.gateway.query("SELECT 1")
    except GatewayError:
        return {"ok": True, "db": False}
    return {"ok": True, "db": True}
