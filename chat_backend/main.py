"""FastAPI backend for the workshop chat."""

from fastapi import FastAPI, Response
from fastapi.responses import HTMLResponse, StreamingResponse
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel
from pathlib import Path
from typing import Optional
import asyncio
import json

from chat_backend.config import Config
from chat_backend.models import SessionState
from chat_backend.providers import create_provider
from chat_backend.session import ChatSession

UI_PATH = Path(__file__).parent / "ui.html"

app = FastAPI(title="Workshop Chat")

# CORS for local development
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def build_session() -> ChatSession:
    """Create a fresh session from the current configuration."""
    try:
        provider = create_provider(Config.CHAT_PROVIDER)
    except ValueError as e:
        print(f"[SERVER] ERROR: {e}")
        print("[SERVER] Falling back to Gemini provider...")
        provider = create_provider("gemini")

    for missing in Config.validate():
        print(f"[SERVER] Missing setting: {missing}")

    return ChatSession(provider, system_instruction=Config.SYSTEM_INSTRUCTION)


# Global state, replaced on every page load
session: Optional[ChatSession] = None


def get_session() -> ChatSession:
    global session
    if session is None:
        session = build_session()
    return session


# Request models
class ChatRequest(BaseModel):
    message: Optional[str] = None


class TextRequest(BaseModel):
    text: str


@app.get("/favicon.ico")
async def favicon():
    """Return empty favicon to prevent 404 errors."""
    return Response(content="", media_type="image/x-icon")


@app.get("/", response_class=HTMLResponse)
async def serve_ui():
    """Serve the main UI page."""
    return HTMLResponse(content=UI_PATH.read_text(encoding="utf-8"))


@app.post("/chat/session")
async def chat_new_session():
    """Start a new session. The page calls this once on load."""
    global session
    session = build_session()
    print(f"[SERVER] New session started (provider={session.provider.name})")
    return session.state.to_dict()


@app.get("/chat/state")
async def chat_state():
    """Get the current session snapshot."""
    return get_session().state.to_dict()


@app.post("/chat/input")
async def chat_input(request: TextRequest):
    """Record the draft text from the input box."""
    current = get_session()
    current.set_pending_input(request.text)
    return current.state.to_dict()


@app.post("/chat/submit")
async def chat_submit(request: ChatRequest):
    """Submit a message. Returns immediately; the reply arrives on /chat/stream."""
    current = get_session()
    current.submit(request.message)
    return current.state.to_dict()


@app.post("/chat/system-instruction")
async def chat_system_instruction(request: TextRequest):
    """Replace the system instruction used by the next submit."""
    current = get_session()
    current.update_system_instruction(request.text)
    return current.state.to_dict()


@app.get("/chat/stream")
async def chat_stream():
    """Stream session snapshots via Server-Sent Events."""
    current = get_session()
    queue: "asyncio.Queue[SessionState]" = asyncio.Queue()
    unsubscribe = current.subscribe(queue.put_nowait)

    async def event_generator():
        try:
            # Initial snapshot so the page renders without waiting for a change
            yield f"data: {json.dumps(current.state.to_dict())}\n\n"
            while True:
                try:
                    snapshot = await asyncio.wait_for(queue.get(), timeout=15.0)
                except asyncio.TimeoutError:
                    # Send heartbeat to keep connection alive
                    yield ": heartbeat\n\n"
                    continue
                yield f"data: {json.dumps(snapshot.to_dict())}\n\n"
        finally:
            unsubscribe()

    return StreamingResponse(
        event_generator(),
        media_type="text/event-stream",
        headers={
            "Cache-Control": "no-cache",
            "Connection": "keep-alive",
            "X-Accel-Buffering": "no",  # Disable buffering for nginx
        }
    )


@app.get("/config/status")
async def config_status():
    """Report which settings are missing, without exposing the key itself."""
    return {
        "provider": get_session().provider.name,
        "configured": get_session().provider.configured,
        "missing": Config.validate(),
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host=Config.HOST, port=Config.PORT)
