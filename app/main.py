from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Dict, Optional

import httpx
import uvicorn
from fastapi import Depends, FastAPI, Form, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import HTMLResponse, JSONResponse
from fastapi.templating import Jinja2Templates

from advisor.errors import InvalidPromptError, ModelInvocationError, RelayError
from advisor.model import ModelFactory, build_model
from advisor.relay import ensure_configured, relay
from chat.relay_client import RelayClient
from chat.sessions import SESSION_COOKIE, ChatSessions
from chat.view import ChatView, PageScroll
from config.settings import get_settings


settings = get_settings()

logging.basicConfig(level=settings.log_level, format="[%(asctime)s] %(levelname)s - %(message)s")
logger = logging.getLogger("advisor")

app = FastAPI(title="Real Estate AI Advisor", version="1.0.0")
templates = Jinja2Templates(directory=str(Path(__file__).parent / "templates"))

# CORS: allow local frontend during development
if settings.is_development:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )


def get_model_factory() -> ModelFactory:
    return build_model


def _build_relay_client() -> RelayClient:
    current = get_settings()
    if current.relay_base_url:
        return RelayClient(current.relay_base_url, timeout=current.relay_timeout)
    # Same-process relay: the page's requests never leave the ASGI app.
    return RelayClient(
        "http://advisor.local",
        timeout=current.relay_timeout,
        transport=httpx.ASGITransport(app=app),
    )


app.state.sessions = ChatSessions(
    lambda: ChatView(_build_relay_client()),
    maxsize=settings.session_max_count,
    ttl=settings.session_ttl,
)


def get_sessions(request: Request) -> ChatSessions:
    return request.app.state.sessions


@app.post("/api/gemini")
async def gemini(
    request: Request,
    settings=Depends(get_settings),
    model_factory: ModelFactory = Depends(get_model_factory),
) -> JSONResponse:
    try:
        ensure_configured(settings)
        try:
            payload = await request.json()
        except ValueError as exc:
            raise InvalidPromptError() from exc
        text = await relay(payload, settings, model_factory)
    except RelayError as err:
        if not isinstance(err, ModelInvocationError):
            logger.warning("Relay rejected request: status=%s text=%s", err.status_code, err.text)
        return JSONResponse({"text": err.text}, status_code=err.status_code)

    return JSONResponse({"text": text})


def _render_page(
    request: Request,
    session_id: str,
    view: ChatView,
    pending_input: Optional[str] = None,
) -> HTMLResponse:
    autoscroll = isinstance(view.scroll, PageScroll) and view.scroll.consume()
    context: Dict[str, Any] = {
        "messages": view.render_history(),
        "loading": view.loading,
        "input": view.input if pending_input is None else pending_input,
        "autoscroll": autoscroll,
    }
    response = templates.TemplateResponse(request, "index.html", context)
    response.set_cookie(SESSION_COOKIE, session_id, httponly=True, samesite="lax")
    return response


@app.get("/", response_class=HTMLResponse)
def index(request: Request, sessions: ChatSessions = Depends(get_sessions)) -> HTMLResponse:
    session_id, view = sessions.start(request.cookies.get(SESSION_COOKIE))
    logger.info("Chat session started: sessions=%s", len(sessions))
    return _render_page(request, session_id, view)


@app.post("/chat", response_class=HTMLResponse)
async def chat(
    request: Request,
    message: Optional[str] = Form(default=""),
    sessions: ChatSessions = Depends(get_sessions),
) -> HTMLResponse:
    session_id, view = sessions.get_or_start(request.cookies.get(SESSION_COOKIE))
    # Another tab may already be waiting on this session; keep its text in the box.
    busy = view.loading
    submitted = await view.submit(message or "")
    logger.info(
        "Chat submit: submitted=%s busy=%s history=%s",
        submitted,
        busy,
        len(view.messages),
    )
    return _render_page(request, session_id, view, pending_input=message if busy else None)


@app.get("/health")
def health():
    return {"status": "ok"}


def run() -> None:
    uvicorn.run("app.main:app", host=settings.host, port=settings.port)


if __name__ == "__main__":
    run()
