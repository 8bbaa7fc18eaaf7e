from datetime import datetime, timezone

from fastapi import APIRouter

from ..settings import settings

router = APIRouter(tags=["health"])


@router.get("/health")
def health():
	return {
		"status": "ok",
		"timestamp": datetime.now(timezone.utc).isoformat(),
		"geminiConfigured": bool(settings.gemini_api_key),
	}
