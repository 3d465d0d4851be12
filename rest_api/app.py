# rest_api/app.py
"""Host-side HTTP endpoint that receives files uploaded by device scripts.

Capture scripts POST ``{"filename": ..., "content": <base64>}`` to ``/save``.
Each upload becomes an ``InboundFile`` session event handed to the
orchestration layer, which decodes and stores it in the workspace.
"""
from typing import Callable, Optional

from fastapi import FastAPI, Header, HTTPException
from pydantic import BaseModel, Field

from scriptbridge.domain.events import InboundFile, SessionEvent

API_VERSION = "0.1.0"

EventSink = Callable[[SessionEvent], bool]


# ---------- Models ----------
class SaveFileRequest(BaseModel):
    filename: str = Field(..., min_length=1, description="workspace-relative, e.g. screenshots/x.png")
    content: str = Field(..., min_length=1, description="base64 encoded file bytes")


class SaveFileResponse(BaseModel):
    ok: bool = True
    filename: str


def create_app(on_event: EventSink, *, api_key: str = "") -> FastAPI:
    """Build the FastAPI app.

    Args:
        on_event: Receives one ``InboundFile`` per upload; returns False when
            the orchestration layer reported a failure.
        api_key: When set, requests must send a matching ``X-API-Key``.
    """
    app = FastAPI(title="scriptbridge host API", version=API_VERSION)

    # ---------- Auth Helper ----------
    def require_key(x_api_key: Optional[str]):
        if api_key and x_api_key != api_key:
            raise HTTPException(401, "Unauthorized")

    @app.get("/health")
    async def health(x_api_key: Optional[str] = Header(None)):
        require_key(x_api_key)
        return {"ok": True, "version": API_VERSION}

    # Runs on the loop thread: the decode and write block the loop until the
    # file is on disk, so uploads are handled one at a time.
    @app.post("/save", response_model=SaveFileResponse)
    async def save_file(req: SaveFileRequest, x_api_key: Optional[str] = Header(None)):
        require_key(x_api_key)
        if not on_event(InboundFile(filename=req.filename, base64_content=req.content)):
            raise HTTPException(500, f"Failed to save file: {req.filename}")
        return SaveFileResponse(filename=req.filename)

    return app
