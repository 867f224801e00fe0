"""
Liveness server

Answers GET / with a static running-status line. Runs as a background task
of the bot process, or standalone with `python api_server.py`.
"""

import uvicorn
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse, PlainTextResponse
from loguru import logger

from config.config import BOT_NAME, BOT_VERSION, HEALTH_HOST, PORT


RUNNING_TEXT = f"{BOT_NAME} {BOT_VERSION} for TWM is running..."

app = FastAPI(
    title=f"{BOT_NAME} liveness",
    version=BOT_VERSION,
    docs_url=None,
    redoc_url=None,
)


# Root endpoint
@app.get("/", response_class=PlainTextResponse)
async def root():
    """
    Root endpoint
    """
    return RUNNING_TEXT


# Error handler for unexpected exceptions
@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    logger.exception(f"Unhandled exception: {exc}")
    return JSONResponse(status_code=500, content={"detail": "An error occurred"})


def create_server(host: str = HEALTH_HOST, port: int = PORT) -> uvicorn.Server:
    """uvicorn server for the liveness app, to be served inside the bot's event loop"""
    config = uvicorn.Config(app, host=host, port=port, log_level="warning", lifespan="off")
    return uvicorn.Server(config)


if __name__ == "__main__":
    from config.logging import setup_logging

    setup_logging()
    logger.info(RUNNING_TEXT)
    uvicorn.run(app, host=HEALTH_HOST, port=PORT, log_level="info")
