"""Liveness endpoint for deployment tooling."""

import sys

import uvicorn
from fastapi import FastAPI
from fastapi.responses import PlainTextResponse

app = FastAPI(title="Mentor Bot", docs_url=None, redoc_url=None, openapi_url=None)


def _log(msg: str):
    print(msg, file=sys.stderr)


@app.get("/health", response_class=PlainTextResponse)
async def health():
    return "ok"


async def serve_health(port: int, host: str = "0.0.0.0"):
    """Run the health app on the current event loop until cancelled."""
    server = uvicorn.Server(uvicorn.Config(app, host=host, port=port, log_level="warning"))
    _log(f"Health server listening on {port}")
    await server.serve()
