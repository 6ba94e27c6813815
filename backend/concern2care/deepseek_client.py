from __future__ import annotations
import httpx
from typing import Any, Dict, List, Optional
from .settings import settings


class LLMError(RuntimeError):
	def __init__(self, message: str, *, status_code: Optional[int] = None) -> None:
		super().__init__(message)
		self.status_code = status_code


class DeepSeekClient:
	def __init__(
		self,
		api_key: Optional[str] = None,
		*,
		base_url: Optional[str] = None,
		model: Optional[str] = None,
		transport: Optional[httpx.AsyncBaseTransport] = None,
	) -> None:
		self.api_key = api_key or settings.deepseek_api_key
		if not self.api_key:
			raise ValueError("DEEPSEEK_API_KEY is not configured")
		self.model = model or settings.deepseek_model
		self.base_url = (base_url or settings.deepseek_base_url).rstrip("/")
		self.max_tokens = settings.llm_max_tokens
		self.temperature = settings.llm_temperature
		self._headers = {
			"Authorization": f"Bearer {self.api_key}",
			"Content-Type": "application/json",
		}
		self._client = httpx.AsyncClient(timeout=settings.llm_timeout_seconds, transport=transport)

	async def chat(self, system_prompt: str, prompt: str) -> str:
		payload: Dict[str, Any] = {
			"model": self.model,
			"messages": [
				{"role": "system", "content": system_prompt},
				{"role": "user", "content": prompt},
			],
			"max_tokens": self.max_tokens,
			"temperature": self.temperature,
		}
		return await self._post_payload(payload)

	async def _post_payload(self, payload: Dict[str, Any]) -> str:
		url = f"{self.base_url}/chat/completions"
		try:
			r = await self._client.post(url, headers=self._headers, json=payload)
			r.raise_for_status()
		except httpx.HTTPStatusError as http_err:
			status = http_err.response.status_code
			raise LLMError(f"DeepSeek API error: {status}", status_code=status) from http_err
		except httpx.TimeoutException as timeout_err:
			raise LLMError("DeepSeek API request timed out") from timeout_err
		except httpx.RequestError as net_err:
			raise LLMError(f"DeepSeek API request failed: {net_err}") from net_err
		try:
			data = r.json()
			choices: List[Dict[str, Any]] = data["choices"]
			content = choices[0]["message"]["content"]
			if content is None:
				content = ""
			if not isinstance(content, str):
				raise TypeError(f"content is {type(content).__name__}, expected str")
		except Exception as parse_err:
			raise LLMError(f"Unexpected DeepSeek response: {r.text[:500]}") from parse_err
		return content

	async def aclose(self) -> None:
		await self._client.aclose()
