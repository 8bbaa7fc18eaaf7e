from __future__ import annotations
from typing import AsyncIterator, Optional

from fastapi import Header, HTTPException

from .gemini_client import GeminiClient


async def get_text_client(x_api_key: Optional[str] = Header(default=None)) -> AsyncIterator[GeminiClient]:
	# A Gemini key sent by the caller takes precedence over GEMINI_API_KEY
	try:
		client = GeminiClient(api_key=x_api_key)
	except ValueError:
		raise HTTPException(status_code=503, detail="Gemini API key is not configured")
	try:
		yield client
	finally:
		await client.aclose()
