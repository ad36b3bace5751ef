import logging
from typing import List, Optional

from langchain_core.language_models.chat_models import BaseChatModel
from langchain_core.messages import AIMessage, BaseMessage, HumanMessage
from langchain_openai import ChatOpenAI

from app.core import config
from app.core.errors import UpstreamError

logger = logging.getLogger(__name__)


def build_chat_model() -> ChatOpenAI:
    return ChatOpenAI(
        model=config.NUTRIPLAN_MODEL,
        temperature=config.NUTRIPLAN_TEMPERATURE,
        api_key=config.OPENAI_API_KEY,
        base_url=config.OPENAI_API_BASE,
        max_tokens=config.NUTRIPLAN_MAX_TOKENS,
    )


def to_messages(history: List[dict]) -> List[BaseMessage]:
    """{"role": "user"|"model", "content": ...} -> LangChain 메시지"""
    messages = []
    for h in history:
        if h.get("role") == "model":
            messages.append(AIMessage(content=h.get("content", "")))
        else:
            messages.append(HumanMessage(content=h.get("content", "")))
    return messages


class CompletionGateway:
    """
    외부 LLM 호출 창구.
    - complete(): 히스토리 + 새 메시지 1개 (stateful)
    - generate(): 프롬프트 1개, 히스토리 없음 (stateless)
    재시도/타임아웃 없음. 실패는 UpstreamError로 감싸서 올립니다.
    """

    def __init__(self, llm: Optional[BaseChatModel] = None):
        # API 키 없이도 import 되도록 첫 호출 때 생성
        self._llm = llm

    @property
    def llm(self) -> BaseChatModel:
        if self._llm is None:
            self._llm = build_chat_model()
        return self._llm

    async def complete(self, history: List[dict], message: str) -> str:
        messages = to_messages(history) + [HumanMessage(content=message)]
        return await self._invoke(messages)

    async def generate(self, prompt: str) -> str:
        return await self._invoke([HumanMessage(content=prompt)])

    async def _invoke(self, messages: List[BaseMessage]) -> str:
        try:
            result = await self.llm.ainvoke(messages)
        except Exception as e:
            logger.exception("❌ LLM API error")
            raise UpstreamError(str(e)) from e
        content = result.content if hasattr(result, "content") else result
        # 일부 모델은 content block 리스트로 응답
        if isinstance(content, list):
            content = "".join(
                part if isinstance(part, str) else part.get("text", "") for part in content
            )
        return str(content)
