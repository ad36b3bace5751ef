import asyncio
import logging
from contextlib import asynccontextmanager
from typing import Dict, List, Optional

from app.core import config

logger = logging.getLogger(__name__)

# 시드 턴 (시스템 지침 + 확인 응답) 개수
SEED_TURNS = 2


class ConversationStore:
    """
    세션 ID -> 대화 히스토리 / 마지막으로 추출된 식단표.
    프로세스 메모리에만 보관하므로 재시작하면 사라집니다.

    같은 세션에 대한 요청은 session() 컨텍스트로 직렬화합니다.
    (읽기 -> LLM 호출 -> 쓰기 전체 구간을 세션별 Lock으로 보호)
    """

    def __init__(self, max_history: Optional[int] = None):
        self._histories: Dict[str, List[dict]] = {}
        self._plans: Dict[str, dict] = {}
        self._locks: Dict[str, asyncio.Lock] = {}
        self._lock_users: Dict[str, int] = {}
        self.max_history = config.NUTRIPLAN_MAX_HISTORY if max_history is None else max_history

    # --- Locking ---
    # 락은 사용 중인 요청 수와 함께 보관하고, 아무도 안 쓰고 세션 데이터도 없으면 버립니다.
    @asynccontextmanager
    async def session(self, session_id: str):
        """세션 하나에 대한 배타적 구간"""
        lock = self._locks.get(session_id)
        if lock is None:
            lock = self._locks[session_id] = asyncio.Lock()
        self._lock_users[session_id] = self._lock_users.get(session_id, 0) + 1
        try:
            async with lock:
                yield self
        finally:
            self._lock_users[session_id] -= 1
            self._release_lock(session_id)

    def _release_lock(self, session_id: str):
        if self._lock_users.get(session_id, 0) > 0:
            return
        if session_id in self._histories or session_id in self._plans:
            return
        self._locks.pop(session_id, None)
        self._lock_users.pop(session_id, None)

    def active_locks(self) -> int:
        return len(self._locks)

    # --- History ---
    def get(self, session_id: str) -> List[dict]:
        """히스토리 복사본 (없으면 빈 리스트)"""
        return list(self._histories.get(session_id, []))

    def put(self, session_id: str, history: List[dict]):
        self._histories[session_id] = self._apply_limit(list(history))

    def exists(self, session_id: str) -> bool:
        return session_id in self._histories

    def delete(self, session_id: str):
        """히스토리와 식단표를 모두 삭제. 없는 세션이어도 에러 없음."""
        self._histories.pop(session_id, None)
        self._plans.pop(session_id, None)
        self._release_lock(session_id)

    def _apply_limit(self, history: List[dict]) -> List[dict]:
        # 시드 2턴은 항상 유지하고, 오래된 user/model 쌍부터 버립니다.
        if self.max_history <= 0:
            return history
        seed, turns = history[:SEED_TURNS], history[SEED_TURNS:]
        keep = max(2, self.max_history - (self.max_history % 2))
        if len(turns) <= keep:
            return history
        dropped = len(turns) - keep
        logger.debug("History trimmed: dropped %d turns", dropped)
        return seed + turns[dropped:]

    # --- Meal Plan ---
    def get_plan(self, session_id: str) -> Optional[dict]:
        return self._plans.get(session_id)

    def put_plan(self, session_id: str, plan: dict):
        self._plans[session_id] = plan

    def __len__(self):
        return len(self._histories)


conversation_store = ConversationStore()
