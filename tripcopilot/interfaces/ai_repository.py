"""
AI Repository - Persists copilot conversations and their side records

Two implementations behind one async interface:
- InMemoryAIRepository: process-local maps guarded by a lock (default)
- RedisAIRepository: redis.asyncio, selected when REDIS_URL is set
"""

import json
import threading
import uuid
from abc import ABC, abstractmethod
from datetime import datetime, timedelta
from typing import Any, Dict, List, Optional

import redis.asyncio as redis
from loguru import logger

from ..errors import CopilotError
from ..schemas.ai_schemas import Conversation, Message, Trip
from ..utils.ai_helpers import utc_now

MAX_CONVERSATIONS = 50


class AIRepository(ABC):
    """Storage operations the copilot pipeline depends on"""

    @abstractmethod
    async def is_trip_member(self, trip_id: str, user_id: str) -> bool:
        ...

    @abstractmethod
    async def get_trip_by_id(self, trip_id: str) -> Trip:
        ...

    @abstractmethod
    async def upsert_conversation(self, trip_id: str, user_id: str, title: str) -> str:
        """Return the (trip, user) conversation id, creating it on first use"""

    @abstractmethod
    async def insert_message(
        self,
        conversation_id: str,
        role: str,
        content: str,
        model: str,
        usage: Optional[Dict[str, Any]]
    ) -> None:
        ...

    @abstractmethod
    async def insert_tool_snapshot(
        self,
        conversation_id: str,
        page_key: str,
        tool_name: str,
        status: str,
        payload: Dict[str, Any]
    ) -> None:
        ...

    @abstractmethod
    async def insert_context_snapshot(self, trip_id: str, page_key: str, payload: Dict[str, Any]) -> None:
        ...

    @abstractmethod
    async def insert_audit_log(self, user_id: str, trip_id: str, action: str, metadata: Dict[str, Any]) -> None:
        ...

    @abstractmethod
    async def list_conversations(self, trip_id: str, user_id: str) -> List[Conversation]:
        """Newest-first by update time, at most 50"""

    @abstractmethod
    async def conversation_belongs_to_user(self, conversation_id: str, user_id: str) -> bool:
        ...

    @abstractmethod
    async def list_messages(self, conversation_id: str, limit: int) -> List[Message]:
        """Newest-first, at most ``limit``"""

    @abstractmethod
    def mode(self) -> str:
        ...


def _stub_trip(trip_id: str) -> Trip:
    today = utc_now().date()
    return Trip(
        id=trip_id,
        destination="Test Destination",
        start_date=today,
        end_date=today + timedelta(days=3),
        timezone="UTC",
    )


# ============================================
# In-memory
# ============================================

class InMemoryAIRepository(AIRepository):
    """
    Process-local repository for development and tests

    Any non-empty trip/user pair counts as a member. Unknown trips resolve
    to a stub trip unless one was registered with ``add_trip``. Snapshots
    and audit entries are kept in lists for inspection.

    Args:
        lock: Guard for every read and write (default threading.RLock)
    """

    def __init__(self, lock: Optional[Any] = None):
        self._lock = lock or threading.RLock()
        self._trips: Dict[str, Trip] = {}
        self._conversations: Dict[str, Conversation] = {}
        self._conversation_by_owner: Dict[str, str] = {}
        self._messages: Dict[str, List[Message]] = {}
        self.tool_snapshots: List[Dict[str, Any]] = []
        self.context_snapshots: List[Dict[str, Any]] = []
        self.audit_logs: List[Dict[str, Any]] = []

    def add_trip(self, trip: Trip) -> None:
        with self._lock:
            self._trips[trip.id] = trip

    async def is_trip_member(self, trip_id: str, user_id: str) -> bool:
        return bool(trip_id) and bool(user_id)

    async def get_trip_by_id(self, trip_id: str) -> Trip:
        with self._lock:
            trip = self._trips.get(trip_id)
        return trip or _stub_trip(trip_id)

    async def upsert_conversation(self, trip_id: str, user_id: str, title: str) -> str:
        owner_key = f"{trip_id}:{user_id}"
        now = utc_now()
        with self._lock:
            existing = self._conversation_by_owner.get(owner_key)
            if existing:
                conversation = self._conversations[existing]
                self._conversations[existing] = conversation.model_copy(update={"updated_at": now})
                return existing

            conversation = Conversation(
                id=str(uuid.uuid4()),
                trip_id=trip_id,
                user_id=user_id,
                title=title,
                created_at=now,
                updated_at=now,
            )
            self._conversations[conversation.id] = conversation
            self._conversation_by_owner[owner_key] = conversation.id
            return conversation.id

    async def insert_message(
        self,
        conversation_id: str,
        role: str,
        content: str,
        model: str,
        usage: Optional[Dict[str, Any]]
    ) -> None:
        message = Message(
            id=str(uuid.uuid4()),
            conversation_id=conversation_id,
            role=role,
            content=content,
            model=model,
            token_usage=dict(usage or {}),
            created_at=utc_now(),
        )
        with self._lock:
            self._messages.setdefault(conversation_id, []).append(message)
            conversation = self._conversations.get(conversation_id)
            if conversation:
                self._conversations[conversation_id] = conversation.model_copy(
                    update={"updated_at": message.created_at}
                )

    async def insert_tool_snapshot(
        self,
        conversation_id: str,
        page_key: str,
        tool_name: str,
        status: str,
        payload: Dict[str, Any]
    ) -> None:
        with self._lock:
            self.tool_snapshots.append({
                "conversationId": conversation_id,
                "pageKey": page_key,
                "toolName": tool_name,
                "status": status,
                "payload": dict(payload),
            })

    async def insert_context_snapshot(self, trip_id: str, page_key: str, payload: Dict[str, Any]) -> None:
        with self._lock:
            self.context_snapshots.append({"tripId": trip_id, "pageKey": page_key, "payload": dict(payload)})

    async def insert_audit_log(self, user_id: str, trip_id: str, action: str, metadata: Dict[str, Any]) -> None:
        with self._lock:
            self.audit_logs.append({
                "userId": user_id,
                "tripId": trip_id,
                "action": action,
                "metadata": dict(metadata),
            })

    async def list_conversations(self, trip_id: str, user_id: str) -> List[Conversation]:
        with self._lock:
            owned = [
                c for c in self._conversations.values()
                if c.trip_id == trip_id and c.user_id == user_id
            ]
        owned.sort(key=lambda c: c.updated_at, reverse=True)
        return owned[:MAX_CONVERSATIONS]

    async def conversation_belongs_to_user(self, conversation_id: str, user_id: str) -> bool:
        with self._lock:
            conversation = self._conversations.get(conversation_id)
        return conversation is not None and conversation.user_id == user_id

    async def list_messages(self, conversation_id: str, limit: int) -> List[Message]:
        if limit <= 0:
            return []
        with self._lock:
            messages = list(self._messages.get(conversation_id, []))
        return list(reversed(messages[-limit:]))

    def mode(self) -> str:
        return "in-memory"


# ============================================
# Redis
# ============================================

class RedisAIRepository(AIRepository):
    """
    Redis-backed repository

    Keys:
        trip:<id>                                 trip JSON
        trip_members:<id>                         set of user ids
        ai:conversation:<id>                      conversation JSON
        ai:conversation_owner:<trip>:<user>       conversation id
        ai:conversations:<trip>:<user>            zset of ids by updatedAt
        ai:messages:<conversation>                list of message JSON
        ai:tool_snapshots / ai:context_snapshots / ai:audit_logs
    """

    def __init__(self, redis_url: str, client: Optional[redis.Redis] = None):
        self.redis_url = redis_url
        self.client = client or redis.from_url(redis_url, encoding="utf-8", decode_responses=True)

    @staticmethod
    def _conversation_key(conversation_id: str) -> str:
        return f"ai:conversation:{conversation_id}"

    @staticmethod
    def _owner_key(trip_id: str, user_id: str) -> str:
        return f"ai:conversation_owner:{trip_id}:{user_id}"

    @staticmethod
    def _index_key(trip_id: str, user_id: str) -> str:
        return f"ai:conversations:{trip_id}:{user_id}"

    async def _load_conversation(self, conversation_id: str) -> Optional[Conversation]:
        raw = await self.client.get(self._conversation_key(conversation_id))
        if raw is None:
            return None
        return Conversation.model_validate_json(raw)

    async def _touch(self, conversation: Conversation, moment: datetime) -> None:
        conversation = conversation.model_copy(update={"updated_at": moment})
        await self.client.set(self._conversation_key(conversation.id), conversation.model_dump_json(by_alias=True))
        await self.client.zadd(
            self._index_key(conversation.trip_id, conversation.user_id),
            {conversation.id: moment.timestamp()},
        )

    async def is_trip_member(self, trip_id: str, user_id: str) -> bool:
        if not trip_id or not user_id:
            return False
        return bool(await self.client.sismember(f"trip_members:{trip_id}", user_id))

    async def get_trip_by_id(self, trip_id: str) -> Trip:
        raw = await self.client.get(f"trip:{trip_id}")
        if raw is None:
            raise CopilotError(f"trip {trip_id} not found")
        return Trip.model_validate_json(raw)

    async def _touch_existing(self, conversation_id: Optional[str], moment: datetime) -> Optional[str]:
        if not conversation_id:
            return None
        conversation = await self._load_conversation(conversation_id)
        if conversation is None:
            return None
        await self._touch(conversation, moment)
        return conversation_id

    async def upsert_conversation(self, trip_id: str, user_id: str, title: str) -> str:
        """
        Reuse the (trip, user) conversation or create it

        The owner key is claimed with SET NX, so concurrent first turns
        agree on one conversation. A key pointing at a missing record is
        replaced.
        """
        now = utc_now()
        owner_key = self._owner_key(trip_id, user_id)
        existing = await self.client.get(owner_key)
        reused = await self._touch_existing(existing, now)
        if reused:
            return reused

        conversation = Conversation(
            id=str(uuid.uuid4()),
            trip_id=trip_id,
            user_id=user_id,
            title=title,
            created_at=now,
            updated_at=now,
        )
        conversation_key = self._conversation_key(conversation.id)
        await self.client.set(conversation_key, conversation.model_dump_json(by_alias=True))

        if existing:
            await self.client.set(owner_key, conversation.id)
        elif not await self.client.set(owner_key, conversation.id, nx=True):
            await self.client.delete(conversation_key)
            winner = await self._touch_existing(await self.client.get(owner_key), now)
            if winner is None:
                raise CopilotError(f"conversation owner for trip {trip_id} vanished during upsert")
            return winner

        await self._touch(conversation, now)
        logger.debug(f"Created conversation {conversation.id} for trip={trip_id}")
        return conversation.id

    async def insert_message(
        self,
        conversation_id: str,
        role: str,
        content: str,
        model: str,
        usage: Optional[Dict[str, Any]]
    ) -> None:
        message = Message(
            id=str(uuid.uuid4()),
            conversation_id=conversation_id,
            role=role,
            content=content,
            model=model,
            token_usage=dict(usage or {}),
            created_at=utc_now(),
        )
        await self.client.rpush(f"ai:messages:{conversation_id}", message.model_dump_json(by_alias=True))
        conversation = await self._load_conversation(conversation_id)
        if conversation is not None:
            await self._touch(conversation, message.created_at)

    async def _append(self, key: str, record: Dict[str, Any]) -> None:
        record["createdAt"] = utc_now().isoformat()
        await self.client.rpush(key, json.dumps(record, default=str))

    async def insert_tool_snapshot(
        self,
        conversation_id: str,
        page_key: str,
        tool_name: str,
        status: str,
        payload: Dict[str, Any]
    ) -> None:
        await self._append("ai:tool_snapshots", {
            "conversationId": conversation_id,
            "pageKey": page_key,
            "toolName": tool_name,
            "status": status,
            "payload": payload,
        })

    async def insert_context_snapshot(self, trip_id: str, page_key: str, payload: Dict[str, Any]) -> None:
        await self._append("ai:context_snapshots", {"tripId": trip_id, "pageKey": page_key, "payload": payload})

    async def insert_audit_log(self, user_id: str, trip_id: str, action: str, metadata: Dict[str, Any]) -> None:
        await self._append("ai:audit_logs", {
            "userId": user_id,
            "tripId": trip_id,
            "action": action,
            "metadata": metadata,
        })

    async def list_conversations(self, trip_id: str, user_id: str) -> List[Conversation]:
        ids = await self.client.zrevrange(self._index_key(trip_id, user_id), 0, MAX_CONVERSATIONS - 1)
        if not ids:
            return []
        rows = await self.client.mget([self._conversation_key(i) for i in ids])
        return [Conversation.model_validate_json(row) for row in rows if row]

    async def conversation_belongs_to_user(self, conversation_id: str, user_id: str) -> bool:
        conversation = await self._load_conversation(conversation_id)
        return conversation is not None and conversation.user_id == user_id

    async def list_messages(self, conversation_id: str, limit: int) -> List[Message]:
        if limit <= 0:
            return []
        rows = await self.client.lrange(f"ai:messages:{conversation_id}", -limit, -1)
        return [Message.model_validate_json(row) for row in reversed(rows)]

    def mode(self) -> str:
        return "redis"

    async def close(self) -> None:
        await self.client.aclose()


def build_repository(redis_url: str = "") -> AIRepository:
    """Redis repository when a URL is configured, otherwise in-memory"""
    if redis_url:
        return RedisAIRepository(redis_url)
    return InMemoryAIRepository()
