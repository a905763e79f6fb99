import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from spacebook.api.v1.availability import router as availability_router
from spacebook.core.config import settings
from spacebook.wiring.dependencies import close_availability_source

class ContextFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        extras = []
        for key in ("space_id", "date", "interval", "generation", "reason", "conflict_type", "error_type", "error"):
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


@asynccontextmanager
async def lifespan(app: FastAPI):
    yield
    await close_availability_source()


app = FastAPI(title="Workspace Availability", version="1.0.0", lifespan=lifespan)

app.include_router(availability_router, prefix="/api/v1", tags=["availability"])


@app.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok"}
