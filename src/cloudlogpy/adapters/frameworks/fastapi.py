"""FastAPI integration."""

from fastapi import FastAPI

from cloudlogpy.adapters.frameworks.asgi import CloudLoggingMiddleware


def install_middleware(app: FastAPI) -> FastAPI:
    """Add CloudLoggingMiddleware to a FastAPI application.

    Args:
        app: The application to instrument.

    Returns:
        The same application, for chaining.
    """
    app.add_middleware(CloudLoggingMiddleware)
    return app
