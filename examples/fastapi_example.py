"""Example FastAPI application that logs for Google Cloud Logging.

Run with:
    GOOGLE_CLOUD_PROJECT=my-project uvicorn examples.fastapi_example:app

Try:
    curl -H 'X-Cloud-Trace-Context: 105445aa7843bc8bf206b120001000/1;o=1' \\
        localhost:8000/users

Every request is logged to stderr as one JSON object per line with the
request and its trace attached, which the Cloud Run and GKE logging agents
turn into structured log entries.
"""

import logging

from fastapi import FastAPI

from cloudlogpy import CloudLoggingHandler, Handler, HandlerOptions, Logger
from cloudlogpy.adapters.frameworks.fastapi import install_middleware

handler = Handler(options=HandlerOptions(level="DEBUG", add_source=True))
log = Logger(handler).with_attrs(service="example")

# Route records from the standard logging module through the same handler
logging.basicConfig(level=logging.INFO, handlers=[CloudLoggingHandler(handler)])

app = install_middleware(FastAPI(title="Cloud Logging Example"))


@app.get("/")
async def root() -> dict[str, str]:
    """Log one record with the request attached."""
    log.info("root called")
    return {"message": "Hello! Check the logs on stderr."}


@app.get("/users")
def get_users() -> dict[str, list[dict[str, str]]]:
    """Sync endpoints run in a thread pool and still see the request."""
    users = [{"id": "1", "name": "Alice"}, {"id": "2", "name": "Bob"}]
    log.with_group("users").debug("fetched users", count=len(users))
    logging.getLogger(__name__).info("served %d users", len(users))
    return {"users": users}


@app.get("/error")
async def error_endpoint() -> dict[str, str]:
    """Log a failure with its stack trace."""
    try:
        raise ValueError("Intentional error for demonstration")
    except ValueError:
        logging.getLogger(__name__).exception("request failed")
    log.notice("recovered", endpoint="/error")
    return {"message": "logged an error"}
