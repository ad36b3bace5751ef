import logging
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from fastapi.middleware.cors import CORSMiddleware
from contextlib import asynccontextmanager
from app.core import config
from app.routers import chat
from app.services.conversation_store import conversation_store

logging.basicConfig(
    level=config.LOG_LEVEL,
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)


# 1. 수명 주기(Lifespan) 관리
@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("🚀 NutriPlan AI 서버 시작 (model=%s)", config.NUTRIPLAN_MODEL)
    if not config.OPENAI_API_KEY:
        logger.warning("⚠️ OPENAI_API_KEY가 설정되지 않았습니다. LLM 호출이 실패합니다.")
    try:
        yield
    finally:
        # 메모리에만 있는 세션은 여기서 사라집니다
        logger.info("👋 AI 서버가 종료됩니다. (활성 세션 %d개 폐기)", len(conversation_store))


# 2. 앱 생성
app = FastAPI(
    title="NutriPlan AI Server",
    description="LLM based conversational meal planning API",
    version="1.0.0",
    lifespan=lifespan
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=config.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# 요청 본문 형식 오류도 다른 입력 오류와 같은 형태(400)로 응답
@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    logger.info("Invalid request body: %s", exc.errors())
    return JSONResponse(status_code=400, content={"error": "Invalid request"})


# 3. 라우터 등록
app.include_router(chat.router)


@app.get("/")
def health_check():
    return {"status": "ok", "msg": "NutriPlan AI Ready"}
