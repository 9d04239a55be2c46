# fastapi web api for pdf to curriculum generation
from fastapi import FastAPI, Depends, File, Request, UploadFile
from fastapi.concurrency import run_in_threadpool
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, StreamingResponse
from starlette.middleware.base import BaseHTTPMiddleware
from datetime import datetime, timezone
from typing import Optional
import logging
import threading
import time

from .config import get_settings
from .errors import AppError, ClientInputError, InternalError, GENERIC_INTERNAL_MESSAGE
from .processing_service import CurriculumService
from .providers import ProviderRegistry
from .streaming import QueueEventSink, SSE_HEADERS, SSE_PREAMBLE, run_to_sink

settings = get_settings()

# configure logging
logging.basicConfig(level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO))
logger = logging.getLogger(__name__)

# initialize fastapi application
app = FastAPI(
    title=settings.APP_NAME,
    description="Generate structured curricula from PDF documents using AI",
    version="1.0.0"
)

# add cors middleware to allow the frontend origin
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# log every request with its status and duration
class RequestLoggingMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request, call_next):
        start_time = time.monotonic()
        response = await call_next(request)
        duration_ms = (time.monotonic() - start_time) * 1000
        logger.info(f"{request.method} {request.url.path} -> {response.status_code} ({duration_ms:.1f} ms)")
        return response


app.add_middleware(RequestLoggingMiddleware)

# initialize processing service
curriculum_service = CurriculumService()


def get_curriculum_service() -> CurriculumService:
    return curriculum_service


# ============================================================================
# ERROR HANDLERS
# ============================================================================

@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError):
    if isinstance(exc, InternalError):
        logger.error(f"Internal error on {request.method} {request.url.path}: {exc.message}")
    else:
        logger.warning(f"{exc.code} on {request.method} {request.url.path}: {exc.message}")
    return JSONResponse(status_code=exc.status_code, content={"success": False, "error": exc.to_dict()})


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logger.error(f"Unhandled error on {request.method} {request.url.path}: {str(exc)}", exc_info=exc)
    return JSONResponse(
        status_code=500,
        content={"success": False, "error": {"code": "INTERNAL_ERROR", "message": GENERIC_INTERNAL_MESSAGE}},
    )


# validate the upload and read it into memory
async def read_pdf_upload(file: Optional[UploadFile]) -> bytes:
    if file is None:
        raise ClientInputError("No file uploaded. Please upload a PDF file.", "NO_FILE_UPLOADED")

    filename = file.filename or ""
    if file.content_type != "application/pdf":
        raise ClientInputError("Invalid file type. Only PDF files are accepted.", "INVALID_FILE_TYPE")

    too_large = ClientInputError(
        f"File too large. Maximum size is {settings.MAX_FILE_SIZE} bytes.", "FILE_TOO_LARGE"
    )
    if file.size is not None and file.size > settings.MAX_FILE_SIZE:
        raise too_large

    # read one byte past the limit so oversized uploads are never loaded whole
    content = await file.read(settings.MAX_FILE_SIZE + 1)
    if len(content) > settings.MAX_FILE_SIZE:
        raise too_large
    if not content:
        raise ClientInputError("Uploaded file is empty.", "EMPTY_FILE")

    logger.info(f"Processing PDF upload: {filename} ({len(content)} bytes)")
    return content


# ============================================================================
# API ROUTES
# ============================================================================

@app.get("/api/v1/curriculum/health")
async def curriculum_health(service: CurriculumService = Depends(get_curriculum_service)):
    """Health check reporting the active provider"""
    return {
        "success": True,
        "data": {
            "status": "healthy",
            "providerName": service.provider_name(),
            "providerAvailable": await run_in_threadpool(service.provider_available),
            "timestamp": datetime.now(timezone.utc).isoformat(),
        },
    }


@app.get("/api/v1/curriculum/providers")
async def list_providers():
    """List the providers that can be configured"""
    return {
        "success": True,
        "data": {
            "providers": ProviderRegistry.available_providers(),
            "default": settings.AI_PROVIDER.lower(),
        },
    }


# endpoint to generate a curriculum in a single response
@app.post("/api/v1/curriculum/generate")
async def generate_curriculum(
    file: Optional[UploadFile] = File(None),
    service: CurriculumService = Depends(get_curriculum_service),
):
    """Generate a curriculum from an uploaded PDF"""
    content = await read_pdf_upload(file)
    try:
        result = await run_in_threadpool(service.run, content)
    except AppError:
        raise
    except Exception as e:
        logger.error(f"Error generating curriculum: {str(e)}", exc_info=True)
        raise InternalError(str(e)) from e

    return {"success": True, "data": result.to_wire()}


# endpoint to generate a curriculum as a server-sent events stream
@app.post("/api/v1/curriculum/generate/stream")
async def generate_curriculum_stream(
    file: Optional[UploadFile] = File(None),
    service: CurriculumService = Depends(get_curriculum_service),
):
    """Generate a curriculum from an uploaded PDF, streaming progress events"""
    content = await read_pdf_upload(file)
    sink = QueueEventSink()

    def worker():
        try:
            run_to_sink(service, content, sink)
        finally:
            sink.end()

    threading.Thread(target=worker, name="curriculum-stream", daemon=True).start()

    async def event_stream():
        try:
            yield SSE_PREAMBLE
            while True:
                frame = await run_in_threadpool(sink.next_frame)
                if frame is QueueEventSink.END:
                    break
                yield frame
        finally:
            # client gone or stream finished, the producer stops at its next event
            sink.close()

    return StreamingResponse(event_stream(), media_type="text/event-stream", headers=SSE_HEADERS)


@app.get("/")
async def root():
    return {"message": settings.APP_NAME, "version": "v1"}


@app.get("/health")
async def health_check():
    """Health check endpoint"""
    return {"status": "healthy", "service": "curriculum-builder"}


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host=settings.HOST, port=settings.PORT)
