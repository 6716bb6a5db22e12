# ywd_admin/api/v1/routers/chats.py
from fastapi import APIRouter, Depends, Query

from ywd_admin.api.v1.deps import get_gateway, require_admin
from ywd_admin.core.gateway import GraphGateway, parse_ref
from ywd_admin.services import get_chat_messages, list_chat_summaries

router = APIRouter(prefix="/chats", tags=["chats"], dependencies=[Depends(require_admin)])


@router.get("")
async def get_chats(
    q: str | None = Query(default=None, description="Search by participant name or phone"),
    period: str = Query(default="all", description="all / today / week / month"),
    gw: GraphGateway = Depends(get_gateway),
):
    """
    Chat summaries, most recently active first.

    Raises:
        ValidationError (400): If ``period`` is unknown (INVALID_PERIOD)
    """
    return await list_chat_summaries(gw, q=q, period=period)


@router.get("/{chat_id}")
async def get_chat(
    chat_id: str,
    q: str | None = Query(default=None, description="Keep messages containing this text"),
    sender: str | None = Query(default=None, description="Keep messages of this user id"),
    gw: GraphGateway = Depends(get_gateway),
):
    """
    Full message history of one chat in send order. With ``q`` each message
    also carries ``highlightedText`` with matches wrapped in <mark>.

    Raises:
        ChatNotFound (404): If the chat does not exist
    """
    messages = await get_chat_messages(
        gw,
        parse_ref(chat_id, "chats"),
        q=q,
        sender=parse_ref(sender, "users") if sender else None,
    )
    return {"id": parse_ref(chat_id, "chats"), "messages": messages}
