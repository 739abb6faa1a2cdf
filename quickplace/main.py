# quickplace/main.py
from fastapi import FastAPI

from .engine import get_placement_config
from .errors import install_error_handlers
from .logging_config import log_event
from .routes import placement
from .settings import get_settings

settings = get_settings()

# Build + validate the lookup tables at import time so a broken anchor
# catalogue fails startup instead of the first request.
get_placement_config()

app = FastAPI(title="QuickPlace API", version=settings.APP_VERSION)
install_error_handlers(app)

app.include_router(placement.router)

log_event("STARTUP", "quickplace ready", {"app_version": settings.APP_VERSION, "env": settings.ENV})


@app.get("/")
def health():
    return {"status": "ok", "service": "quickplace"}
