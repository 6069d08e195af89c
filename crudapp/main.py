"""FastAPI application entrypoint."""

import logging

from fastapi import FastAPI

from crudapp.api.admin import router as admin_router
from crudapp.api.auth import router as auth_router
from crudapp.api.cart import router as cart_router
from crudapp.api.orders import router as orders_router
from crudapp.api.posts import router as posts_router
from crudapp.api.products import router as products_router
from crudapp.api.profile import router as profile_router
from crudapp.api.todos import router as todos_router
from crudapp.core.config import configure_logging
from crudapp.core.config import get_settings
from crudapp.core.errors import register_error_handlers
from crudapp.db import models as _models  # noqa: F401

logger = logging.getLogger(__name__)

settings = get_settings()
configure_logging(settings)
logger.info("Starting crudapp with settings=%s", settings.safe_for_logging())

app = FastAPI(title="crudapp")
register_error_handlers(app)
app.include_router(auth_router)
app.include_router(profile_router)
app.include_router(admin_router)
app.include_router(posts_router)
app.include_router(todos_router)
app.include_router(products_router)
app.include_router(cart_router)
app.include_router(orders_router)


@app.get("/health")
def health() -> dict[str, str]:
    """Health check stub endpoint for service readiness."""
    return {"status": "ok"}
