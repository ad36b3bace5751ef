# 대화 / 식단 API

import logging
from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from app.core.errors import NutriPlanError
from app.schemas.dtos import ChatActionRequest
from app.services.agent import NutriPlanCoach, coach
from app.services.meal_plan import current_week_of

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Chat"])

GENERIC_ERROR = "Failed to process request. Please try again."


def get_coach() -> NutriPlanCoach:
    return coach


def error_response(message: str, status_code: int = 400) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


@router.post("/chat")
async def chat_action(req: ChatActionRequest, nutri: NutriPlanCoach = Depends(get_coach)):
    """
    action 값으로 분기하는 단일 엔드포인트.
    start / chat / clear / generateWeek / getPlan
    """
    if not req.sessionId and req.action != "generateWeek":
        return error_response("Session ID required")

    try:
        if req.action == "start":
            return await nutri.start_conversation(req.sessionId)

        if req.action == "chat":
            if not req.message:
                return error_response("Message required")
            return await nutri.chat(req.sessionId, req.message)

        if req.action == "clear":
            await nutri.clear_conversation(req.sessionId)
            return {"success": True}

        if req.action == "getPlan":
            return {"mealPlan": nutri.get_meal_plan(req.sessionId)}

        if req.action == "generateWeek":
            return await _generate_week(req, nutri)

        return error_response("Invalid action")

    except NutriPlanError as e:
        logger.error("API error (%s): %s", req.action, e)
        return error_response(GENERIC_ERROR, 500)
    except Exception:
        logger.exception("Unhandled API error (%s)", req.action)
        return error_response(GENERIC_ERROR, 500)


async def _generate_week(req: ChatActionRequest, nutri: NutriPlanCoach):
    if req.profile is None:
        return error_response("Profile required")
    if req.currentWeek is not None and req.currentWeek < 0:
        return error_response("Invalid currentWeek")

    current_week = req.currentWeek or 1
    # 주차를 안 보냈으면 세션에 저장된 식단표 기준으로 계산
    if not req.currentWeek and req.sessionId:
        stored = nutri.get_meal_plan(req.sessionId)
        if stored is not None:
            current_week = current_week_of(stored)

    week = await nutri.generate_next_week(req.profile, current_week, req.preferences)

    # 세션에 식단표가 있으면 서버 쪽 사본에도 병합 (응답은 새 주차분만)
    if req.sessionId:
        await nutri.extend_meal_plan(req.sessionId, week)

    return week
