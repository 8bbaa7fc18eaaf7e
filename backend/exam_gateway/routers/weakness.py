from __future__ import annotations
import logging

from fastapi import APIRouter, Depends, HTTPException

from ..dependencies import get_text_client
from ..errors import GatewayError
from ..schemas import AnalyzeWeaknessRequest, WeaknessReport
from ..weakness.analyzer import analyze_weaknesses

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["weakness"])


@router.post("/analyze-weakness", response_model=WeaknessReport)
async def analyze_weakness(req: AnalyzeWeaknessRequest, client=Depends(get_text_client)):
    try:
        return await analyze_weaknesses(req.results, client)
    except GatewayError:
        raise
    except Exception:
        logger.exception("Weakness analysis failed")
        raise HTTPException(status_code=500, detail="internal error")
