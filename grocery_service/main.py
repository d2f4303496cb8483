import logging
import os

import uvicorn
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from sqlalchemy.exc import SQLAlchemyError

from . import config
from .database import Base, engine
from .errors import IntegrationError, ModuleError
from .routers import (
    auth,
    cart,
    categories,
    fraud_check,
    menus,
    modules,
    orders,
    products,
    reviews,
    settings,
    tracking,
    transactions,
    upload,
    whatsapp,
)

logging.basicConfig(
    level=config.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

# Create database tables on startup if they don't exist.
Base.metadata.create_all(bind=engine)

app = FastAPI(title="Grocery Store API")

app.add_middleware(
    CORSMiddleware,
    allow_origins=config.CORS_ALLOW_ORIGINS,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(ModuleError)
def module_error_handler(request: Request, exc: ModuleError):
    return JSONResponse(status_code=exc.status_code, content={"detail": str(exc)})


@app.exception_handler(IntegrationError)
def integration_error_handler(request: Request, exc: IntegrationError):
    logger.error("%s integration failed on %s: %s", exc.service, request.url.path, exc)
    return JSONResponse(status_code=500, content={"detail": str(exc)})


@app.exception_handler(SQLAlchemyError)
def database_error_handler(request: Request, exc: SQLAlchemyError):
    logger.exception("Database error on %s", request.url.path)
    return JSONResponse(status_code=500, content={"detail": "Database error"})


# Malformed bodies and query strings are client errors, reported as 400.
@app.exception_handler(RequestValidationError)
def validation_error_handler(request: Request, exc: RequestValidationError):
    return JSONResponse(status_code=400, content={"detail": jsonable_errors(exc)})


def jsonable_errors(exc: RequestValidationError):
    return [
        {"loc": list(error.get("loc", ())), "msg": error.get("msg"), "type": error.get("type")}
        for error in exc.errors()
    ]


for router_module in (
    orders,
    modules,
    products,
    categories,
    reviews,
    cart,
    settings,
    transactions,
    tracking,
    menus,
    auth,
    upload,
    whatsapp,
    fraud_check,
):
    app.include_router(router_module.router)

os.makedirs(config.UPLOAD_DIR, exist_ok=True)
app.mount(
    config.UPLOAD_URL_PREFIX,
    StaticFiles(directory=config.UPLOAD_DIR),
    name="uploads",
)


@app.get("/")
def root():
    """Health check endpoint."""
    return {"message": "Grocery service is running"}


if __name__ == "__main__":
    uvicorn.run(app, host="0.0.0.0", port=config.PORT)
