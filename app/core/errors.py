class NutriPlanError(Exception):
    """서비스 공통 예외"""


class UpstreamError(NutriPlanError):
    """LLM 호출 실패 (네트워크, 쿼터, 모델 오류). 재시도하지 않습니다."""


class PlanParseError(NutriPlanError):
    """주차 추가 생성 응답에서 식단 JSON을 찾거나 파싱하지 못함"""
