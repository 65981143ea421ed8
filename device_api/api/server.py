import sys
import subprocess
from typing import IO, Dict, AsyncIterator, Any
from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from .errors import request_validation_handler
from .routes import root, devices

from device_api.config import get_settings
from device_api.db.session import sessionmanager


def init_api() -> FastAPI:
    settings = get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        sessionmanager.init(settings.database_uri)
        if settings.create_schema:
            async with sessionmanager.connect() as conn:
                await sessionmanager.create_all(conn)
        yield
        await sessionmanager.close()

    api = FastAPI(title="Device API", lifespan=lifespan)
    api.add_exception_handler(
        RequestValidationError,
        request_validation_handler,  # type: ignore[arg-type]
    )
    api.include_router(root.router, prefix="/api")
    api.include_router(devices.router, prefix=devices.PREFIX)

    return api


server = init_api()


def start_api(
    host: str,
    port: int,
    env: Dict[str, str],
    stdout: IO[Any] | int,
    stderr: IO[Any] | int,
) -> subprocess.Popen[bytes]:
    proc = subprocess.Popen(
        [
            sys.executable,
            "-m",
            "uvicorn",
            "device_api.api.server:server",
            "--host",
            host,
            "--port",
            str(port),
        ],
        env=env,
        stdout=stdout,
        stderr=stderr,
    )

    return proc
