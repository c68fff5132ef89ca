import logging
from contextlib import asynccontextmanager

import uvicorn
from dotenv import load_dotenv
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import PlainTextResponse

from bulk_write import router as bulk_write_router
from catalog import router as catalog_router
from core import db, settings
from core.errors import GatewayError

load_dotenv()

logging.basicConfig(
    level=settings.log_level(),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

# Body-shape failures caught by FastAPI before our handlers run.
_VALIDATION_MESSAGES = {
    "/create-table": "Table name and columns are required",
    "/update-table": "Invalid data format.",
    "/upload": "No data to upload.",
}


@asynccontextmanager
async def lifespan(app: FastAPI):
    # One pool per process, handed to routes through db.get_pool.
    app.state.pool = await db.create_pool()
    await db.check_connection(app.state.pool)
    try:
        yield
    finally:
        await db.close_pool(app.state.pool)
        app.state.pool = None


app = FastAPI(lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_allow_origins(),
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(catalog_router.router, tags=["catalog"])
app.include_router(bulk_write_router.router, tags=["bulk-write"])


@app.exception_handler(GatewayError)
async def gateway_error_handler(_: Request, exc: GatewayError) -> PlainTextResponse:
    return PlainTextResponse(exc.public_message(), status_code=exc.status_code)


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError) -> PlainTextResponse:
    logger.warning("request_invalid path=%s errors=%s", request.url.path, exc.errors())
    message = "Invalid request body."
    for prefix, text in _VALIDATION_MESSAGES.items():
        if request.url.path.startswith(prefix):
            message = text
            break
    return PlainTextResponse(message, status_code=400)


@app.get("/health")
def health() -> dict:
    return {"status": "ok"}


def run() -> None:
    uvicorn.run(app, host=settings.host(), port=settings.port(), log_level=settings.log_level().lower())


if __name__ == "__main__":
    run()
