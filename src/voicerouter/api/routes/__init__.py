from __future__ import annotations

from fastapi import APIRouter

# Root router to be included by app.py
api_router = APIRouter()

from voicerouter.api.routes.health import router as health_router  # noqa: E402
from voicerouter.api.routes.transcripts import router as transcripts_router  # noqa: E402
from voicerouter.api.routes.webhooks import router as webhooks_router  # noqa: E402

api_router.include_router(health_router)
api_router.include_router(transcripts_router)
api_router.include_router(webhooks_router)
