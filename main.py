# main.py
import logging
from typing import Optional

from fastapi import APIRouter, Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from errors import ChatError
from models import (
    MessagesResponse,
    SendMessageRequest,
    SendMessageResponse,
    StartChatRequest,
    StartChatResponse,
)
from settings import Settings
from store import ChatStore

logger = logging.getLogger("chat_api")


def get_store(request: Request) -> ChatStore:
    return request.app.state.store


router = APIRouter()

@router.get("/healthz")
def healthz():
    return {"ok": True}

@router.post("/chat/start", response_model=StartChatResponse)
def start_chat(req: StartChatRequest, store: ChatStore = Depends(get_store)):
    chat_id = store.start(req.user1, req.user2)
    return StartChatResponse(chatId=chat_id)

@router.post("/chat/{chatId}/message", response_model=SendMessageResponse)
def send_message(chatId: str, req: SendMessageRequest, store: ChatStore = Depends(get_store)):
    message = store.append(chatId, req.sender, req.text)
    return SendMessageResponse(success=True, message=message)

@router.get("/chat/{chatId}/messages", response_model=MessagesResponse)
def get_messages(chatId: str, store: ChatStore = Depends(get_store)):
    return MessagesResponse(messages=store.list_messages(chatId))


# --- Error rendering: every failure is {"error": "..."} ---
async def chat_error_handler(request: Request, exc: ChatError):
    logger.warning("%s %s rejected (%s): %s", request.method, request.url.path, exc.status_code, exc.message)
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})

# pydantic error types that mean the body as a whole is unusable
BODY_ERROR_TYPES = {"json_invalid", "model_attributes_type", "model_type", "dict_type"}

def _is_body_error(error: dict) -> bool:
    loc = tuple(error.get("loc", ()))
    return len(loc) <= 1 or error.get("type") in BODY_ERROR_TYPES

def _required_fields_message(request: Request) -> str:
    if "chatId" in request.path_params:
        return "Sender and text are required."
    return "Both user1 and user2 are required."

async def request_validation_handler(request: Request, exc: RequestValidationError):
    # an unknown chat wins over a malformed body
    chat_id = request.path_params.get("chatId")
    if chat_id is not None and chat_id not in request.app.state.store:
        logger.warning("%s %s rejected (404): unknown chat", request.method, request.url.path)
        return JSONResponse(status_code=404, content={"error": "Chat not found."})

    errors = exc.errors()
    if not errors or _is_body_error(errors[0]):
        detail = _required_fields_message(request)
    else:
        first = errors[0]
        field = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
        detail = f"{field}: {first.get('msg')}"
    logger.warning("%s %s rejected (400): %s", request.method, request.url.path, detail)
    return JSONResponse(status_code=400, content={"error": detail})


def create_app(settings: Optional[Settings] = None, store: Optional[ChatStore] = None) -> FastAPI:
    settings = settings or Settings()

    app = FastAPI(title=f"Anonymous Chat API ({settings.INSTANCE_NAME})", version="1.0.0")
    app.state.settings = settings
    app.state.store = store if store is not None else ChatStore()

    # --- CORS ---
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(ChatError, chat_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.include_router(router, prefix=settings.route_prefix)
    return app


# --- Settings & app ---
settings = Settings()
logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format="[%(asctime)s] %(levelname)s - %(message)s",
)
app = create_app(settings)


if __name__ == "__main__":
    import uvicorn

    logger.info(
        "Chat API %s running on http://%s:%s%s",
        settings.INSTANCE_NAME,
        settings.HOST,
        settings.PORT,
        settings.route_prefix,
    )
    uvicorn.run(app, host=settings.HOST, port=settings.PORT)
