import logging
from typing import Optional

from langchain_core.language_models.chat_models import BaseChatModel

from app.services.conversation_store import ConversationStore, conversation_store
from app.services.gateway import CompletionGateway
from app.services.meal_plan import merge_week
from app.services.plan_extractor import extract_meal_plan, extract_week
from app.services.prompts import GREETING_REQUEST, build_week_prompt, seed_history

logger = logging.getLogger(__name__)


class NutriPlanCoach:
    """
    세션 대화 관리 + 식단 JSON 추출.
    영양 계산은 전부 모델 프롬프트에 맡기고, 여기서는 히스토리와 식단표만 관리합니다.
    """

    def __init__(self, llm: Optional[BaseChatModel] = None, store: Optional[ConversationStore] = None):
        self.gateway = CompletionGateway(llm)
        self.store = store if store is not None else conversation_store

    async def start_conversation(self, session_id: str) -> dict:
        """
        세션 시드 + 인사 요청.
        이미 있는 세션이면 초기화 후 다시 시작합니다 (시드 중복 방지).
        """
        async with self.store.session(session_id):
            history = seed_history()
            response = await self.gateway.complete(history, GREETING_REQUEST)

            # 인사 응답을 받은 뒤에만 기존 세션(히스토리, 식단표)을 교체
            if self.store.exists(session_id):
                logger.info("🔄 Restarting existing session %s", session_id)
                self.store.delete(session_id)

            history.append({"role": "user", "content": GREETING_REQUEST})
            history.append({"role": "model", "content": response})
            self.store.put(session_id, history)

        logger.info("🚀 Session started: %s", session_id)
        return {"message": response}

    async def chat(self, session_id: str, message: str) -> dict:
        """
        한 턴 대화. 응답에 식단 블록이 있으면 분리해서 mealPlan으로 반환합니다.
        LLM 호출이 실패하면 히스토리는 변경되지 않습니다.
        """
        async with self.store.session(session_id):
            history = self.store.get(session_id)
            if not history:
                history = seed_history()

            response = await self.gateway.complete(history, message)

            # 성공한 경우에만 커밋
            history.append({"role": "user", "content": message})
            history.append({"role": "model", "content": response})
            self.store.put(session_id, history)

            meal_plan, cleaned = extract_meal_plan(response)
            if meal_plan is not None:
                self.store.put_plan(session_id, meal_plan)
                logger.info("🥗 Meal plan captured for session %s", session_id)

        result = {"message": cleaned}
        if meal_plan is not None:
            result["mealPlan"] = meal_plan
        return result

    async def generate_next_week(self, profile: dict, current_week: int = 1, preferences: Optional[str] = None) -> dict:
        """
        히스토리 없이 profile + 현재 주차만으로 다음 7일을 생성합니다.
        반환값은 새 주차 분량(days, shoppingList)뿐이며 병합은 호출자 몫입니다.
        """
        prompt = build_week_prompt(profile, current_week, preferences)
        response = await self.gateway.generate(prompt)
        week = extract_week(response)
        logger.info("📅 Week %d generated (%d days)", current_week + 1, len(week["days"]))
        return week

    async def clear_conversation(self, session_id: str):
        async with self.store.session(session_id):
            self.store.delete(session_id)
        logger.info("🧹 Session cleared: %s", session_id)

    def get_meal_plan(self, session_id: str) -> Optional[dict]:
        return self.store.get_plan(session_id)

    async def extend_meal_plan(self, session_id: str, week: dict) -> Optional[dict]:
        """세션에 저장된 식단표가 있으면 새 주차를 합쳐서 저장합니다."""
        async with self.store.session(session_id):
            merged = merge_week(self.store.get_plan(session_id), week)
            if merged is None:
                return None
            self.store.put_plan(session_id, merged)
        return merged


coach = NutriPlanCoach()
