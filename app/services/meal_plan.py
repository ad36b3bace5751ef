# 주차 추가 생성 결과를 기존 식단표에 합치는 헬퍼 (호출자 측 병합)
import json
from typing import List, Optional


def _item_key(item) -> str:
    # 모델 출력이라 문자열이 아닐 수도 있음
    return item if isinstance(item, str) else json.dumps(item, sort_keys=True)


def _as_list(value) -> list:
    return list(value) if isinstance(value, list) else []


def merge_shopping_lists(current: List[str], new_items: List[str]) -> List[str]:
    """중복 없이 합칩니다. 먼저 나온 순서를 유지합니다."""
    merged = []
    seen = set()
    for item in _as_list(current) + _as_list(new_items):
        key = _item_key(item)
        if key in seen:
            continue
        seen.add(key)
        merged.append(item)
    return merged


def current_week_of(plan: Optional[dict]) -> int:
    """식단표에 들어있는 일수로 현재 주차를 계산 (7일 = 1주차). 식단표가 아니면 1."""
    if not isinstance(plan, dict):
        return 1
    days = len(_as_list(plan.get("days")))
    return max(1, -(-days // 7))


def merge_week(plan: dict, week: dict) -> Optional[dict]:
    """
    기존 식단표에 새 주차(days, shoppingList)를 합친 새 dict를 반환합니다.
    profile, recommendations 등 나머지 필드는 그대로 유지됩니다.
    plan이 dict가 아니면 합칠 식단표가 없는 것으로 보고 None.
    """
    if not isinstance(plan, dict):
        return None
    merged = dict(plan)
    merged["days"] = _as_list(plan.get("days")) + _as_list(week.get("days"))
    merged["shoppingList"] = merge_shopping_lists(plan.get("shoppingList"), week.get("shoppingList"))
    return merged
