import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from pollito import __version__
from pollito.errors import NotFoundError, ValidationFailure
from pollito.settings import API_DEBUG, LOG_LEVEL, settings

logging.basicConfig(
    level=LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(
    title="Pollito Farm API",
    version=__version__,
    description="HTTP layer over the farm store: coops, purchases, expenses, activities, invoices and mortality.",
    debug=API_DEBUG,
)

# --- CORS ----------------------------------------------------------
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization", "Accept"],
)

# --- Include Routers ----------------------------------------------------------
from .coops import router as coops_router  # noqa: E402
from .purchases import router as purchases_router  # noqa: E402
from .expenses import router as expenses_router  # noqa: E402
from .activities import router as activities_router  # noqa: E402
from .invoices import router as invoices_router  # noqa: E402
from .mortalities import router as mortalities_router  # noqa: E402
from .dashboard import router as dashboard_router  # noqa: E402

app.include_router(coops_router)
app.include_router(purchases_router)
app.include_router(expenses_router)
app.include_router(activities_router)
app.include_router(invoices_router)
app.include_router(mortalities_router)
app.include_router(dashboard_router)


# ---------- error mapping: every failure is {"message": ...} ----------
@app.exception_handler(NotFoundError)
async def not_found(request: Request, exc: NotFoundError):
    return JSONResponse(status_code=400, content={"message": str(exc)})


@app.exception_handler(ValidationFailure)
async def validation_failure(request: Request, exc: ValidationFailure):
    return JSONResponse(status_code=400, content={"message": str(exc)})


@app.exception_handler(RequestValidationError)
async def request_validation(request: Request, exc: RequestValidationError):
    parts = []
    for err in exc.errors():
        loc = ".".join(str(p) for p in err.get("loc", ()) if p != "body")
        parts.append(f"{loc}: {err.get('msg')}" if loc else err.get("msg", "invalid input"))
    return JSONResponse(status_code=400, content={"message": "; ".join(parts) or "Invalid request"})


@app.exception_handler(Exception)
async def unexpected(request: Request, exc: Exception):
    logger.exception("unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(status_code=500, content={"message": "Internal server error"})


# ---------- health-check ----------
@app.get("/")
def root():
    return {"status": "ok", "msg": "Pollito API is alive"}


if __name__ == "__main__":
    import uvicorn

    from pollito.settings import API_HOST, API_PORT

    uvicorn.run("api.main:app", host=API_HOST, port=API_PORT, reload=API_DEBUG)
