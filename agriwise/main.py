import logging
from contextlib import asynccontextmanager

from dotenv import load_dotenv
from fastapi import FastAPI

from agriwise.api.dependencies import advisory_error_handler
from agriwise.api.rest_routes.advisory import router as advisory_router
from agriwise.api.rest_routes.chat import router as chat_router
from agriwise.core.config import settings
from agriwise.core.exceptions import AdvisoryError
from agriwise.core.genai_client import GeminiUpstream
from agriwise.services.advisory_service import AdvisoryService
from agriwise.services.dedup_cache import InFlightCache
from agriwise.services.request_builder import RequestBuilder
from agriwise.services.retrying_executor import RetryingExecutor

load_dotenv()

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)


def create_advisory_service() -> AdvisoryService:
    return AdvisoryService(
        executor=RetryingExecutor(GeminiUpstream()),
        cache=InFlightCache(),
        builder=RequestBuilder(),
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    app.state.advisory_service = create_advisory_service()
    yield


app = FastAPI(title="AgriWise Advisor", lifespan=lifespan)

app.add_exception_handler(AdvisoryError, advisory_error_handler)

app.include_router(chat_router)
app.include_router(advisory_router)


@app.get("/")
async def root():
    return {"message": "Welcome to AgriWise, your daily farm companion!"}
