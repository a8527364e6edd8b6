from fastapi import HTTPException, Request

from streakkeeper.core.security import decode_service_token
from streakkeeper.flows.manager import ConversationManager
from streakkeeper.ranks.table import RankTable


def get_gateway(request: Request) -> str:
    """Authenticate the calling gateway from its bearer token; returns its name."""
    header = request.headers.get("authorization", "")
    if not header.lower().startswith("bearer "):
        raise HTTPException(status_code=401, detail="Not authenticated")

    payload = decode_service_token(header[7:].strip())
    if not payload or not payload.get("sub"):
        raise HTTPException(status_code=401, detail="Invalid token")
    return payload["sub"]


def get_rank_table(request: Request) -> RankTable:
    return request.app.state.rank_table


def get_conversations(request: Request) -> ConversationManager:
    return request.app.state.conversations
