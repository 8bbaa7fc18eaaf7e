from __future__ import annotations
import logging
import httpx
from typing import Any, Dict, Optional, Tuple
from .settings import settings

logger = logging.getLogger(__name__)

_AI_STUDIO_URL = "https://generativelanguage.googleapis.com/v1beta/models/{model}:generateContent"
_VERTEX_URL = (
	"https://{region}-aiplatform.googleapis.com/v1/projects/{project}"
	"/locations/{region}/publishers/google/models/{model}:generateContent"
)


def _first_candidate_text(data: Dict[str, Any]) -> str:
	return data["candidates"][0]["content"]["parts"][0]["text"]


def _first_choice_text(data: Dict[str, Any]) -> str:
	return data["choices"][0]["message"]["content"]


class GeminiClient:
	"""Text-completion adapter over the Gemini REST API.

	Any object exposing ``async generate(prompt) -> str`` can stand in for this
	class; the weakness analysis and exam generation only rely on that method.
	When OPENROUTER_API_KEY is set, a failed Gemini call is retried once through
	OpenRouter with the same prompt.
	"""

	def __init__(
		self,
		api_key: Optional[str] = None,
		*,
		base_url: Optional[str] = None,
		model: Optional[str] = None,
		transport: Optional[httpx.AsyncBaseTransport] = None,
	) -> None:
		self.api_key = api_key or settings.gemini_api_key
		if not self.api_key:
			raise ValueError("GEMINI_API_KEY is not configured")
		self.model = model or settings.gemini_model
		self.provider = settings.gemini_provider
		self.base_url = base_url or self._default_url()
		self._fallback_key = settings.openrouter_api_key
		# One pool serves both Gemini and the fallback endpoint
		self._http = httpx.AsyncClient(timeout=settings.gemini_timeout_seconds, transport=transport)

	def _default_url(self) -> str:
		if self.provider == "vertex":
			return _VERTEX_URL.format(
				region=settings.vertex_region,
				project=settings.vertex_project or "placeholder-project",
				model=self.model,
			)
		return _AI_STUDIO_URL.format(model=self.model)

	def _credentials(self) -> Tuple[Dict[str, str], Dict[str, str]]:
		# AI Studio takes the key as a query parameter, Vertex as a header
		if self.provider == "vertex":
			return {}, {"x-goog-api-key": self.api_key}
		return {"key": self.api_key}, {}

	async def generate(self, prompt: str) -> str:
		params, headers = self._credentials()
		payload = {"contents": [{"parts": [{"text": prompt}]}]}
		try:
			r = await self._http.post(self.base_url, params=params, headers=headers, json=payload)
			r.raise_for_status()
		except httpx.HTTPError as e:
			return await self._after_failure(prompt, e)
		try:
			return _first_candidate_text(r.json())
		except (ValueError, KeyError, IndexError, TypeError):
			return await self._after_failure(prompt, RuntimeError(f"Unexpected Gemini response: {r.text[:200]}"))

	async def _after_failure(self, prompt: str, error: Exception) -> str:
		logger.warning("Gemini call to %s failed: %s", self.model, error)
		if not self._fallback_key:
			raise error
		headers = {
			"Authorization": f"Bearer {self._fallback_key}",
			"HTTP-Referer": settings.openrouter_referer,
			"X-Title": settings.openrouter_title,
		}
		payload = {
			"model": settings.openrouter_model,
			"messages": [{"role": "user", "content": prompt}],
		}
		try:
			r = await self._http.post(settings.openrouter_base_url, headers=headers, json=payload)
			r.raise_for_status()
			return _first_choice_text(r.json())
		except Exception as fallback_err:
			raise RuntimeError(
				f"Gemini call failed ({error}); fallback via OpenRouter also failed"
			) from fallback_err

	async def aclose(self) -> None:
		await self._http.aclose()
