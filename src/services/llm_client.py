"""LLM 선택 클라이언트

장바구니 최적화에서 '매장별 상품 선택' 한 번의 호출만 담당합니다.
재시도는 하지 않습니다 (호출 측 정책).
"""

from typing import Optional, Protocol, runtime_checkable

from openai import AsyncOpenAI, OpenAIError

from src.core.config import settings
from src.core.exceptions import LLMConfigurationException, SelectionRequestException
from src.core.logging import logger


@runtime_checkable
class SelectionClient(Protocol):
    """system/user 프롬프트를 받아 모델의 원문 텍스트를 돌려주는 클라이언트"""

    async def complete(self, system_prompt: str, user_prompt: str) -> str:
        ...


class OpenAISelectionClient:
    """OpenAI Chat Completions 기반 선택 클라이언트

    SDK 클라이언트는 첫 호출 시 생성합니다. API 키가 없으면 그때
    LLMConfigurationException을 발생시킵니다 (입력 검증이 먼저 동작하도록).
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: Optional[str] = None,
        temperature: Optional[float] = None,
        timeout_s: Optional[float] = None,
        client: Optional[AsyncOpenAI] = None,
    ):
        self.api_key = api_key or settings.openai_api_key
        self.model = model or settings.openai_model
        self.temperature = settings.openai_temperature if temperature is None else temperature
        self.timeout_s = timeout_s or settings.openai_timeout_s
        self._client = client

    def _get_client(self) -> AsyncOpenAI:
        if self._client is None:
            if not self.api_key:
                raise LLMConfigurationException("OPENAI_API_KEY is not configured")
            self._client = AsyncOpenAI(api_key=self.api_key, timeout=self.timeout_s, max_retries=0)
        return self._client

    async def complete(self, system_prompt: str, user_prompt: str) -> str:
        client = self._get_client()
        logger.info(
            f"[LLM] Requesting selection: model={self.model}, "
            f"system_chars={len(system_prompt)}, user_chars={len(user_prompt)}"
        )
        try:
            response = await client.chat.completions.create(
                model=self.model,
                messages=[
                    {"role": "system", "content": system_prompt},
                    {"role": "user", "content": user_prompt},
                ],
                temperature=self.temperature,
            )
        except OpenAIError as e:
            logger.error(f"[LLM] Request failed: {type(e).__name__}: {e}")
            raise SelectionRequestException(f"{type(e).__name__}: {e}") from e

        content = response.choices[0].message.content if response.choices else None
        if not content:
            raise SelectionRequestException("empty completion")

        logger.debug(f"[LLM] Received {len(content)} chars")
        return content
