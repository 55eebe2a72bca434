from __future__ import annotations
import httpx
import logging
from typing import Any, Dict, List, Optional
from .errors import NetworkError
from .settings import settings

logger = logging.getLogger(__name__)


class CompletionClient:
	"""Thin async wrapper around an OpenAI-style chat-completions endpoint."""

	def __init__(
		self,
		api_key: Optional[str] = None,
		*,
		base_url: Optional[str] = None,
		model: Optional[str] = None,
		http_client: Optional[httpx.AsyncClient] = None,
	) -> None:
		self.api_key = api_key or settings.openai_api_key
		self.model = model or settings.openai_model
		self.base_url = base_url or settings.openai_base_url
		self._owns_client = http_client is None
		self._client = http_client or httpx.AsyncClient(timeout=settings.openai_timeout_seconds)

	async def complete(self, instruction: str, *, user_message: Optional[str] = None) -> str:
		# A missing key is treated like any other failed call so callers fall back
		if not self.api_key:
			raise NetworkError("completion failed: OPENAI_API_KEY is not configured")
		messages: List[Dict[str, str]] = [{"role": "system", "content": instruction}]
		if user_message is not None:
			messages.append({"role": "user", "content": user_message})
		payload: Dict[str, Any] = {"model": self.model, "messages": messages}
		headers = {
			"Authorization": f"Bearer {self.api_key}",
			"Content-Type": "application/json",
		}
		try:
			r = await self._client.post(self.base_url, headers=headers, json=payload)
			r.raise_for_status()
		except httpx.HTTPStatusError as http_err:
			raise NetworkError(f"completion failed: HTTP {http_err.response.status_code}") from http_err
		except httpx.RequestError as net_err:
			raise NetworkError(f"completion failed: {net_err!r}") from net_err
		try:
			data = r.json()
		except ValueError as err:
			raise NetworkError("completion failed: response body is not JSON") from err
		try:
			content = data["choices"][0]["message"]["content"]
		except (KeyError, IndexError, TypeError):
			logger.debug("Unexpected completion envelope: %.200s", r.text)
			return ""
		return content if isinstance(content, str) else ""

	async def aclose(self) -> None:
		if self._owns_client:
			await self._client.aclose()


async def get_completion_client():
	client = CompletionClient()
	try:
		yield client
	finally:
		await client.aclose()
