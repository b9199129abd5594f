from __future__ import annotations

from contextlib import asynccontextmanager
from functools import lru_cache
from typing import AsyncIterator, Dict, Union

from fastapi import Depends, FastAPI, File, Form, UploadFile
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.datastructures import UploadFile as StarletteUploadFile

from .configuration import ServiceConfig, configure_logging, load_service_config
from .exceptions import UploadError
from .middleware import AccessLogMiddleware, unhandled_exception_handler
from .models import ErrorResponse, PolicyMetadata, UploadRequest, UploadResult
from .pipeline import MISSING_FIELDS_MESSAGE, UploadPipeline, build_pipeline


@asynccontextmanager
async def lifespan(_: FastAPI) -> AsyncIterator[None]:
    configure_logging(load_service_config().log_level)
    yield


app = FastAPI(title="CV Intake API", version="0.1.0", lifespan=lifespan)

allowed_origins = ["*"]
app.add_middleware(
    CORSMiddleware,
    allow_origins=allowed_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.add_middleware(AccessLogMiddleware)
app.add_exception_handler(Exception, unhandled_exception_handler)


def get_service_config() -> ServiceConfig:
    return load_service_config()


@lru_cache(maxsize=1)
def get_pipeline() -> UploadPipeline:
    return build_pipeline(load_service_config())


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=ErrorResponse(error=message).model_dump())


@app.get("/healthz")
def healthcheck() -> Dict[str, str]:
    return {"status": "ok"}


@app.get("/config/policy", response_model=PolicyMetadata)
def get_policy(config: ServiceConfig = Depends(get_service_config)) -> PolicyMetadata:
    return PolicyMetadata(
        allowed_extensions=list(config.policy.allowed_extensions),
        max_file_size=config.policy.max_file_size,
    )


@app.post(
    "/upload",
    response_model=UploadResult,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
def upload_file(
    userUUID: str = Form(""),
    firstName: str = Form(""),
    lastName: str = Form(""),
    cvFile: Union[UploadFile, str, None] = File(None),
    pipeline: UploadPipeline = Depends(get_pipeline),
):
    """
    Validate, scan, convert and store one CV.

    A cvFile part without a filename parameter arrives as a plain form value
    and is answered like a missing file part.
    """
    if not isinstance(cvFile, StarletteUploadFile):
        if not (userUUID and firstName and lastName):
            return _error(400, MISSING_FIELDS_MESSAGE)
        return _error(400, "No file part")

    try:
        if not (userUUID and firstName and lastName):
            return _error(400, MISSING_FIELDS_MESSAGE)
        request = UploadRequest(
            submitter_id=userUUID,
            first_name=firstName,
            last_name=lastName,
            filename=cvFile.filename or "",
            stream=cvFile.file,
        )
        return pipeline.process(request)
    except UploadError as exc:
        return _error(exc.status_code, exc.message)
    finally:
        cvFile.file.close()
