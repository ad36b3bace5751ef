# 데이터의 형태(DTO)를 정의

from pydantic import BaseModel
from typing import Optional


# [POST /api/chat] action 기반 단일 엔드포인트
class ChatActionRequest(BaseModel):
    action: Optional[str] = None
    sessionId: Optional[str] = None
    message: Optional[str] = None

    # generateWeek 전용
    # profile은 모델이 계산해 준 값 그대로 (bmr, tdee, targetCalories, protein, carbs, fat, fiber, goal, warnings)
    # 모델 출력이므로 스키마 검증 없이 dict로 받습니다.
    profile: Optional[dict] = None
    currentWeek: Optional[int] = None
    preferences: Optional[str] = None
