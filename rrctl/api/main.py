import logging

from dotenv import load_dotenv
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from rrctl.api.middleware import AuthMiddleware
from rrctl.api.routes import cluster, config
from rrctl.errors import (
    AlreadyRunning,
    ConfigSourceError,
    NoValidConfigs,
    NotRunning,
    RegistryBusy,
    RRError,
)
from rrctl.logging import setup_logger

load_dotenv()
logger = setup_logger("rrctl.api")

app = FastAPI(title="rrctl")
app.add_middleware(AuthMiddleware)

app.include_router(config.router)
app.include_router(cluster.router)

CONFLICT_ERRORS = (AlreadyRunning, NotRunning, RegistryBusy)
BAD_REQUEST_ERRORS = (NoValidConfigs, ConfigSourceError)

@app.exception_handler(RRError)
async def rrctl_error_handler(request: Request, exc: RRError):
    if isinstance(exc, CONFLICT_ERRORS):
        status_code = 409
    elif isinstance(exc, BAD_REQUEST_ERRORS):
        status_code = 400
    else:
        status_code = 500
    logger.log(
        logging.ERROR if status_code == 500 else logging.WARNING,
        f"{request.method} {request.url.path} failed: {exc}",
    )
    return JSONResponse(status_code=status_code, content={"detail": str(exc)})
