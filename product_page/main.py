import logging

from fastapi import FastAPI

from product_page.api.v1.sessions import router as sessions_router
from product_page.core.config import settings

class ContextFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        extras = []
        for key in ("session_id", "postal_code", "status", "reason"):
            value = getattr(record, key, None)
            if value not in (None, ""):
                extras.append(f"{key}={value}")
        base = super().format(record)
        if extras:
            return f"{base} | " + " ".join(extras)
        return base


handler = logging.StreamHandler()
handler.setFormatter(ContextFormatter("%(levelname)s:%(name)s:%(message)s"))

root = logging.getLogger()
root.setLevel(getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO))
root.handlers.clear()
root.addHandler(handler)

app = FastAPI(title="Product Page Session Service", version="1.0.0")

app.include_router(sessions_router, prefix="/api/v1", tags=["sessions"])


@app.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok"}
