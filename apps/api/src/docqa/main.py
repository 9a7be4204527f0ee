import asyncio
from functools import lru_cache
import logging
from typing import Annotated, Any, Awaitable, TypeVar

from fastapi import APIRouter, Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse, PlainTextResponse
from pydantic import BaseModel, ConfigDict, Field

from docqa.config import Settings, get_settings
from docqa.errors import DocumentQAError, GenerationError
from docqa.llm import GenerationClient, build_generation_client
from docqa.logging_config import configure_logging
from docqa.origins import OriginGateMiddleware, OriginPolicy, PolicyCORSMiddleware
from docqa.services.answering import AnswerStreamer
from docqa.services.documents import (
    DocumentFetcher,
    DocumentIngestor,
    DocumentParser,
    DocumentStore,
    HttpDocumentFetcher,
    parse_pdf,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")

_DISCONNECT_POLL_SECONDS = 0.25

router = APIRouter()


class UploadDocumentsRequest(BaseModel):
    model_config = ConfigDict(extra="ignore")

    source_document_url: str = Field(min_length=1)
    target_document_url: str = Field(min_length=1)


class AnswerQuestionRequest(BaseModel):
    model_config = ConfigDict(extra="ignore")

    question: str = Field(min_length=1)


class ClientDisconnected(Exception):
    pass


def get_document_store(request: Request) -> DocumentStore:
    return request.app.state.document_store


def get_document_fetcher() -> DocumentFetcher:
    settings = get_settings()
    return HttpDocumentFetcher(timeout_seconds=settings.fetch_timeout_seconds)


def get_document_parser() -> DocumentParser:
    return parse_pdf


@lru_cache
def get_generation_client() -> GenerationClient:
    return build_generation_client(get_settings())


def _error_response(exc: DocumentQAError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content={"error": str(exc)})


def _describe_validation_error(exc: RequestValidationError) -> str:
    fields = sorted(
        {
            str(error["loc"][1])
            for error in exc.errors()
            if len(error.get("loc", ())) > 1
            and error["loc"][0] == "body"
            and isinstance(error["loc"][1], str)
        }
    )
    if not fields:
        return "Request body must be a JSON object."
    if len(fields) == 1:
        return f"{fields[0]} must be a non-empty string."
    return f"{' and '.join(fields)} must be non-empty strings."


async def _validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    return JSONResponse(status_code=400, content={"error": _describe_validation_error(exc)})


async def _run_until_disconnected(request: Request, awaitable: Awaitable[T]) -> T:
    """Await ``awaitable`` but cancel it as soon as the client goes away."""
    task = asyncio.ensure_future(awaitable)
    try:
        while True:
            done, _ = await asyncio.wait({task}, timeout=_DISCONNECT_POLL_SECONDS)
            if task in done:
                return task.result()
            if await request.is_disconnected():
                raise ClientDisconnected()
    finally:
        if not task.done():
            task.cancel()
            # Wait for upstream cleanup; asyncio.wait never re-raises the task's CancelledError.
            await asyncio.wait({task})


@router.get("/", response_class=PlainTextResponse)
def read_root() -> str:
    return "Document Question Answering Service is running."


@router.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok"}


@router.post("/upload-documents")
async def upload_documents(
    request: UploadDocumentsRequest,
    store: Annotated[DocumentStore, Depends(get_document_store)],
    fetcher: Annotated[DocumentFetcher, Depends(get_document_fetcher)],
    parser: Annotated[DocumentParser, Depends(get_document_parser)],
) -> Any:
    ingestor = DocumentIngestor(store=store, fetcher=fetcher, parser=parser)
    try:
        await ingestor.ingest(request.source_document_url, request.target_document_url)
    except DocumentQAError as exc:
        return _error_response(exc)

    return {"message": "Documents uploaded and parsed successfully."}


@router.post("/answer-question")
async def answer_question(
    request: AnswerQuestionRequest,
    http_request: Request,
    store: Annotated[DocumentStore, Depends(get_document_store)],
    generation_client: Annotated[GenerationClient, Depends(get_generation_client)],
) -> Any:
    pair = store.snapshot()
    streamer = AnswerStreamer(generation_client)

    try:
        answer = await _run_until_disconnected(
            http_request, streamer.answer(request.question, pair)
        )
    except ClientDisconnected:
        logger.info("Client disconnected; generation for %r cancelled", request.question)
        return JSONResponse(status_code=499, content={"error": "Client disconnected"})
    except GenerationError as exc:
        return JSONResponse(
            status_code=exc.status_code,
            content={
                "error": f"Error answering question: {exc}",
                "partial_answer": exc.partial_answer,
            },
        )
    except DocumentQAError as exc:
        return _error_response(exc)

    return {
        "answer": answer,
        "source_document": pair.source_ref,
        "target_document": pair.target_ref,
        "question": request.question,
    }


def create_app(settings: Settings | None = None) -> FastAPI:
    settings = settings or get_settings()
    policy = OriginPolicy.from_entries(settings.allowed_origins)

    app = FastAPI(title="Document Question Answering Service", version="0.1.0")
    app.state.document_store = DocumentStore()
    app.add_exception_handler(RequestValidationError, _validation_error_handler)
    app.add_middleware(PolicyCORSMiddleware, policy=policy)
    # Outermost: disallowed origins never reach CORS handling or routes.
    app.add_middleware(OriginGateMiddleware, policy=policy)
    app.include_router(router)
    return app


configure_logging(get_settings().log_level)

app = create_app()


def run() -> None:
    import uvicorn

    settings = get_settings()
    logger.info("Document Question Answering Service listening on port %d", settings.port)
    uvicorn.run("docqa.main:app", host="0.0.0.0", port=settings.port, reload=False)


if __name__ == "__main__":
    run()
