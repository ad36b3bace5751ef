import json
import logging
import math
from typing import Optional, Tuple

from app.core.errors import PlanParseError
from app.services.prompts import MEALPLAN_START, MEALPLAN_END

logger = logging.getLogger(__name__)


def find_plan_block(text: str) -> Optional[Tuple[int, int, str]]:
    """
    첫 번째 시작 마커와 그 뒤의 첫 번째 종료 마커 사이 구간을 찾습니다.
    반환: (블록 시작 위치, 블록 끝 위치(마커 포함), 내부 문자열) / 없으면 None
    """
    start = text.find(MEALPLAN_START)
    if start == -1:
        return None

    body_start = start + len(MEALPLAN_START)
    end = text.find(MEALPLAN_END, body_start)
    if end == -1:
        return None

    return start, end + len(MEALPLAN_END), text[body_start:end]


def _reject_constant(name: str):
    # JSON 표준에 없는 NaN / Infinity 는 거부 (응답 직렬화 단계에서 터짐)
    raise ValueError(f"Invalid JSON constant: {name}")


def _parse_float(value: str) -> float:
    # 1e999 처럼 범위를 벗어나 inf가 되는 숫자도 같은 이유로 거부
    number = float(value)
    if not math.isfinite(number):
        raise ValueError(f"Out of range number: {value}")
    return number


def _loads(body: str):
    return json.loads(body.strip(), parse_constant=_reject_constant, parse_float=_parse_float)


def extract_meal_plan(text: str) -> Tuple[Optional[dict], str]:
    """
    모델 응답에서 식단 JSON을 분리합니다.
    - 성공: (파싱된 객체, 블록을 제거하고 strip한 텍스트)
    - 마커 없음 / JSON 파싱 실패 / 객체가 아닌 JSON: (None, 원본 텍스트)
    """
    block = find_plan_block(text)
    if block is None:
        return None, text

    start, end, body = block
    try:
        plan = _loads(body)
    except ValueError as e:
        # 채팅 경로에서는 식단만 빠지고 답변은 그대로 전달
        logger.warning("⚠️ Failed to parse meal plan JSON: %s", e)
        return None, text

    if not isinstance(plan, dict):
        logger.warning("⚠️ Meal plan payload is not a JSON object (%s)", type(plan).__name__)
        return None, text

    cleaned = (text[:start] + text[end:]).strip()
    return plan, cleaned


def extract_week(text: str) -> dict:
    """
    주차 추가 생성 응답 파싱. 텍스트 대체물이 없으므로 실패 시 예외를 던집니다.
    """
    block = find_plan_block(text)
    if block is None:
        raise PlanParseError("Failed to parse week generation response")

    try:
        parsed = _loads(block[2])
    except ValueError as e:
        raise PlanParseError(f"Week generation returned invalid JSON: {e}") from e

    if not isinstance(parsed, dict):
        raise PlanParseError("Week generation payload is not a JSON object")

    return {
        "days": parsed.get("days") or [],
        "shoppingList": parsed.get("shoppingList") or [],
    }
