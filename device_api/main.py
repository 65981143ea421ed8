import os
import sys
import signal
import subprocess
import time
from types import FrameType
from typing import List, Optional, Any
import logging as log

from device_api.api.server import start_api
from device_api.config import get_settings, setup_logging

procs: List[subprocess.Popen[Any]] = []


def shutdown_handler(sig: int, frame: Optional[FrameType]) -> None:
    log.info("Shutting down...")

    for proc in procs:
        if proc.poll() is None:
            proc.terminate()
            try:
                proc.wait(timeout=5)
            except subprocess.TimeoutExpired:
                proc.kill()

    sys.exit(0)


if __name__ == "__main__":
    settings = get_settings()
    setup_logging(settings.log_level)

    api_proc = start_api(
        settings.api_host,
        settings.api_port,
        env=dict(os.environ),
        stdout=sys.stdout,
        stderr=sys.stderr,
    )

    procs.append(api_proc)
    log.info(f"API listening on {settings.api_host}:{settings.api_port}")

    signal.signal(signal.SIGINT, shutdown_handler)
    signal.signal(signal.SIGTERM, shutdown_handler)

    try:
        while True:
            if api_proc.poll() is not None:
                log.error("API process exited unexpectedly")
                shutdown_handler(signal.SIGTERM, None)
            time.sleep(0.1)
    except KeyboardInterrupt:
        shutdown_handler(signal.SIGINT, None)
