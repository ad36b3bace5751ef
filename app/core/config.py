import os
from dotenv import load_dotenv

load_dotenv()

# 1. LLM (OpenAI 호환 엔드포인트)
OPENAI_API_KEY = os.getenv("OPENAI_API_KEY")
OPENAI_API_BASE = os.getenv("OPENAI_API_BASE")
NUTRIPLAN_MODEL = os.getenv("NUTRIPLAN_MODEL", "gpt-4.1-mini")
NUTRIPLAN_TEMPERATURE = float(os.getenv("NUTRIPLAN_TEMPERATURE", "0.7"))
# 7일치 식단 JSON은 길기 때문에 넉넉하게
NUTRIPLAN_MAX_TOKENS = int(os.getenv("NUTRIPLAN_MAX_TOKENS", "16000"))

# 2. Conversation Store
# 시드 2턴 이후 보관할 최대 메시지 수 (0 = 무제한)
NUTRIPLAN_MAX_HISTORY = int(os.getenv("NUTRIPLAN_MAX_HISTORY", "0"))

# 3. Server
CORS_ORIGINS = [o.strip() for o in os.getenv("CORS_ORIGINS", "*").split(",") if o.strip()]
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
