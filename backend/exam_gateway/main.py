import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from .errors import ExternalCallFailure, InvalidInput
from .settings import settings
from .routers import health
from .routers import exam
from .routers import weakness

logging.basicConfig(
	level=settings.log_level.upper(),
	format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(title="Exam Gateway API")
app.include_router(health.router)
app.include_router(exam.router)
app.include_router(weakness.router)


@app.exception_handler(InvalidInput)
async def invalid_input_handler(request: Request, exc: InvalidInput):
	return JSONResponse(status_code=400, content={"detail": str(exc)})


@app.exception_handler(ExternalCallFailure)
async def external_call_failure_handler(request: Request, exc: ExternalCallFailure):
	logger.warning("%s %s: upstream failure: %s", request.method, request.url.path, exc)
	return JSONResponse(status_code=502, content={"detail": str(exc)})
