from fastapi import FastAPI
import uvicorn
from fastapi.middleware.cors import CORSMiddleware
from api.routes.editor_routes import editor_routes
from api.routes.training_routes import training_routes
from api.routes.wizard_routes import wizard_routes
from api.config import create_db
from api.utils.logger import configure_logging, set_request_id, clear_request_id
from fastapi import Request
from starlette.responses import Response, JSONResponse
from starlette.status import HTTP_500_INTERNAL_SERVER_ERROR
from fastapi.exceptions import RequestValidationError
from fastapi import HTTPException

from studio.core.reorder import ReorderError
from studio.errors import (
    FieldValidationError,
    PersistenceError,
    SaveInProgressError,
    StudioError,
    TrainingNotFoundError,
    UploadError,
    WizardStateError,
)

app = FastAPI(title="Training Studio")
logger = configure_logging()
create_db()
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# First match wins; subclasses before their bases.
STUDIO_ERROR_STATUS = (
    (FieldValidationError, 422),
    (ReorderError, 400),
    (UploadError, 400),
    (TrainingNotFoundError, 404),
    (SaveInProgressError, 409),
    (WizardStateError, 409),
    (PersistenceError, 502),
)


def studio_error_status(exc: StudioError) -> int:
    for error_type, status in STUDIO_ERROR_STATUS:
        if isinstance(exc, error_type):
            return status
    return 400


@app.middleware("http")
async def request_logger(request: Request, call_next):
    rid = set_request_id(request.headers.get("x-request-id"))
    try:
        logger.info("request start method=%s path=%s client=%s", request.method, request.url.path, request.client)
        response: Response = await call_next(request)
        logger.info("request end status=%s method=%s path=%s", response.status_code, request.method, request.url.path)
        response.headers["x-request-id"] = rid
        return response
    except Exception:
        logger.exception("request error method=%s path=%s", request.method, request.url.path)
        raise
    finally:
        clear_request_id()


@app.exception_handler(HTTPException)
async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
    # Log server-side errors with stack traces; client errors as warnings.
    if exc.status_code >= 500:
        logger.exception("http error status=%s method=%s path=%s detail=\n%s", exc.status_code, request.method, request.url.path, exc.detail)
    else:
        logger.warning("http error status=%s method=%s path=%s detail=\n%s", exc.status_code, request.method, request.url.path, exc.detail)
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.detail})


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    logger.warning("validation error method=%s path=%s errors=\n%s", request.method, request.url.path, exc.errors())
    return JSONResponse(status_code=422, content={"detail": exc.errors()})


@app.exception_handler(StudioError)
async def studio_exception_handler(request: Request, exc: StudioError) -> JSONResponse:
    status = studio_error_status(exc)
    content = {"detail": str(exc), "error": type(exc).__name__}
    if isinstance(exc, FieldValidationError) and exc.errors:
        content["errors"] = exc.errors
    if status >= 500:
        # Store failures: message is ours, the wrapped cause stays in the log.
        logger.error("studio error status=%s method=%s path=%s", status, request.method, request.url.path, exc_info=exc)
    else:
        logger.warning("studio error status=%s method=%s path=%s detail=%s", status, request.method, request.url.path, exc)
    return JSONResponse(status_code=status, content=content)


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    # Never leak internal exception details to clients.
    logger.exception("unhandled error method=%s path=%s", request.method, request.url.path)
    return JSONResponse(
        status_code=HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "Internal Server Error"},
    )


@app.get("/")
def read_root():
    return {"message": "Training Studio is Healthy"}

app.include_router(training_routes, prefix="/studio")
app.include_router(editor_routes, prefix="/studio")
app.include_router(wizard_routes, prefix="/studio")

if __name__ == "__main__":
    uvicorn.run(app, host="0.0.0.0", port=8000)
