# ywd_admin/services/chats.py
"""
Read-only projections of the instructor <-> cadet chats written by the
mobile application: per-chat summaries and full message history, with the
search and highlighting the admin panel offers.
"""
import datetime as dt
import html
import re
import uuid
from typing import Any

from ywd_admin.core.errors import ChatNotFound, ValidationError
from ywd_admin.core.gateway import GraphGateway, parse_ref
from ywd_admin.core.reference import ROLE_CADET, ROLE_INSTRUCTOR
from ywd_admin.services.lookups import roles_by_user

UNKNOWN_CADET = "Неизвестный курсант"
UNKNOWN_INSTRUCTOR = "Неизвестный инструктор"
NO_MESSAGES = "Нет сообщений."
NO_PHONE = "N/A"

# period -> maximum age of the last activity
PERIODS = {
    "today": dt.timedelta(hours=24),
    "week": dt.timedelta(days=7),
    "month": dt.timedelta(days=30),
}


def as_utc(value: dt.datetime) -> dt.datetime:
    """Naive datetimes from the database are UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=dt.timezone.utc)
    return value.astimezone(dt.timezone.utc)


def iso(value: dt.datetime | None) -> str | None:
    if value is None:
        return None
    return as_utc(value).isoformat().replace("+00:00", "Z")


def highlight(text: str, query: str) -> str:
    """
    HTML-escape ``text`` and wrap every case-insensitive occurrence of
    ``query`` in <mark>, keeping the original casing of the match.
    """
    if not query:
        return html.escape(text)
    pattern = re.compile(re.escape(query), re.IGNORECASE)
    parts = []
    pos = 0
    for match in pattern.finditer(text):
        parts.append(html.escape(text[pos:match.start()]))
        parts.append(f"<mark>{html.escape(match.group(0))}</mark>")
        pos = match.end()
    parts.append(html.escape(text[pos:]))
    return "".join(parts)


def check_period(period: str) -> None:
    if period != "all" and period not in PERIODS:
        raise ValidationError(f"Неизвестный период: {period}", code="INVALID_PERIOD")


def within_period(last_activity: dt.datetime | None, period: str, now: dt.datetime | None = None) -> bool:
    check_period(period)
    if period == "all":
        return True
    if last_activity is None:
        return False
    now = as_utc(now or dt.datetime.now(dt.timezone.utc))
    return now - as_utc(last_activity) <= PERIODS[period]


def _summary(chat_id, participants: list[tuple], last_message, message_count: int) -> dict:
    cadet = next((u for u, role in participants if role == ROLE_CADET), None)
    instructor = next((u for u, role in participants if role == ROLE_INSTRUCTOR), None)
    last_time = last_message.date_sent if last_message else None
    return {
        "id": str(chat_id),
        "cadetName": cadet.full_name if cadet else UNKNOWN_CADET,
        "instructorName": instructor.full_name if instructor else UNKNOWN_INSTRUCTOR,
        "cadetPhone": cadet.phone if cadet else NO_PHONE,
        "instructorPhone": instructor.phone if instructor else NO_PHONE,
        "lastMessage": last_message.text if last_message else NO_MESSAGES,
        "lastMessageTime": iso(last_time),
        "lastActivity": iso(last_time),
        "messageCount": message_count,
        "_last": last_time,
    }


async def list_chat_summaries(
    gw: GraphGateway,
    q: str | None = None,
    period: str = "all",
    now: dt.datetime | None = None,
) -> list[dict]:
    """
    One summary per chat, most recently active first (silent chats last).
    ``q`` matches participant names and phones, ``period`` is one of
    all / today / week / month.
    """
    check_period(period)
    roles = await roles_by_user(gw)
    users = {u.id: u for u in await gw.find("users")}

    chat_users: dict = {}
    for chat_id, user_id in await gw.edges("participates"):
        if user_id in users:
            chat_users.setdefault(chat_id, []).append((users[user_id], roles.get(user_id)))

    message_chat = dict(await gw.edges("belongs_to"))
    counts: dict = {}
    last: dict = {}
    for message in await gw.find("messages", order_by=("date_sent",)):
        chat_id = message_chat.get(message.id)
        if chat_id is None:
            continue
        counts[chat_id] = counts.get(chat_id, 0) + 1
        last[chat_id] = message

    query = (q or "").strip().lower()
    items = []
    for chat in await gw.find("chats"):
        item = _summary(chat.id, chat_users.get(chat.id, []), last.get(chat.id), counts.get(chat.id, 0))
        if query:
            haystack = " ".join(
                (item["cadetName"], item["instructorName"], item["cadetPhone"], item["instructorPhone"])
            ).lower()
            if query not in haystack:
                continue
        if not within_period(item["_last"], period, now):
            continue
        items.append(item)

    stamp = dt.datetime.min.replace(tzinfo=dt.timezone.utc)
    items.sort(key=lambda i: as_utc(i["_last"]) if i["_last"] else stamp, reverse=True)
    for item in items:
        del item["_last"]
    return items


async def get_chat_messages(
    gw: GraphGateway,
    chat_id: Any,
    q: str | None = None,
    sender: str | None = None,
) -> list[dict]:
    """
    Full history of one chat in send order. ``sender`` keeps one
    participant's messages; ``q`` keeps matching messages and adds
    ``highlightedText``.
    """
    chat = await gw.select("chats", chat_id)
    if chat is None:
        raise ChatNotFound()

    sender_id = None
    if sender:
        try:
            sender_id = uuid.UUID(parse_ref(sender, "users"))
        except ValueError:
            return []

    messages = await gw.find("messages", order_by=("date_sent",), belongs_to_out__target_id=chat.id)
    if not messages:
        return []

    senders = dict(await gw.edges("sent_by", source_id__in=[m.id for m in messages]))
    users = {u.id: u for u in await gw.find("users", id__in=list(set(senders.values())))}
    roles = await roles_by_user(gw)

    query = (q or "").strip()
    items = []
    for message in messages:
        user = users.get(senders.get(message.id))
        if sender_id is not None and (user is None or user.id != sender_id):
            continue
        if query and query.lower() not in message.text.lower():
            continue
        item: dict[str, Any] = {
            "id": str(message.id),
            "text": message.text,
            "date_sent": iso(message.date_sent),
            "sender": {
                "id": str(user.id),
                "name": user.name,
                "surname": user.surname,
                "phone": user.phone,
                "role": roles.get(user.id),
            } if user else None,
        }
        if query:
            item["isHighlighted"] = True
            item["highlightedText"] = highlight(message.text, query)
        items.append(item)
    return items
