import logging

from fastapi import FastAPI

from .settings import settings
from .routers import interventions
from .routers import recommendations

logging.basicConfig(
	level=getattr(logging, settings.log_level.upper(), logging.INFO),
	format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger("concern2care")

app = FastAPI(title="Concern2Care Intervention API")
app.include_router(interventions.router)
app.include_router(recommendations.router)


@app.get("/info")
def root():
	return {"status": "ok", "llm_configured": bool(settings.deepseek_api_key)}


@app.on_event("startup")
async def startup_event():
	if not settings.deepseek_api_key:
		logger.warning("DEEPSEEK_API_KEY is not set; recommendations will use mock data")
