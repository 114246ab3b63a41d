# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Development fixture data: users, conversations, participants, messages."""

from __future__ import annotations

import argparse
from datetime import UTC, datetime, timedelta

from sqlalchemy import delete

from chat_backend.application.services.password_hashing import \
    WerkzeugPasswordHasher
from chat_backend.domain.chat import (ConversationType, MessageStatus,
                                      MessageType, ParticipantRole)
from chat_backend.domain.users.repositories import PasswordHasher
from chat_backend.infrastructure.db import (Conversation, Database, Message,
                                            Participant, User)
from chat_backend.shared.config import load_config
from chat_backend.shared.logging import logger, setup_logging

SEED_USERS = (
    ("u_alice", "alice@example.com", "password123", "Alice", "https://i.pravatar.cc/150?img=1"),
    ("u_bob", "bob@example.com", "password123", "Bob", "https://i.pravatar.cc/150?img=2"),
    (
        "u_charlie",
        "charlie@example.com",
        "password123",
        "Charlie",
        "https://i.pravatar.cc/150?img=3",
    ),
    ("u_bot", "bot@chat.local", "bot", "Chat Assistant", "https://i.pravatar.cc/150?img=8"),
)

SEED_CONVERSATIONS = (
    ("c_alice_bob", ConversationType.DIRECT, None),
    ("c_group_general", ConversationType.GROUP, "General"),
    ("c_ai_helper", ConversationType.AI, "Assistant"),
)

SEED_PARTICIPANTS = (
    ("p_alice_direct", "u_alice", "c_alice_bob", ParticipantRole.MEMBER),
    ("p_bob_direct", "u_bob", "c_alice_bob", ParticipantRole.MEMBER),
    ("p_alice_group", "u_alice", "c_group_general", ParticipantRole.ADMIN),
    ("p_bob_group", "u_bob", "c_group_general", ParticipantRole.MEMBER),
    ("p_charlie_group", "u_charlie", "c_group_general", ParticipantRole.MEMBER),
    ("p_alice_ai", "u_alice", "c_ai_helper", ParticipantRole.MEMBER),
    ("p_bot_ai", "u_bot", "c_ai_helper", ParticipantRole.MEMBER),
)


def _messages(now: datetime) -> list[Message]:
    def ago(minutes: int) -> datetime:
        return now - timedelta(minutes=minutes)

    return [
        Message(
            id="m1",
            conversation_id="c_alice_bob",
            sender_id="u_alice",
            type=MessageType.TEXT,
            text="Hey Bob! How are you?",
            status=MessageStatus.SENT,
            created_at=ago(60),
        ),
        Message(
            id="m2",
            conversation_id="c_alice_bob",
            sender_id="u_bob",
            type=MessageType.TEXT,
            text="I'm good! Just setting up the chat app.",
            status=MessageStatus.DELIVERED,
            reply_to_message_id="m1",
            created_at=ago(55),
        ),
        Message(
            id="m3",
            conversation_id="c_alice_bob",
            sender_id="u_alice",
            type=MessageType.IMAGE,
            media_url="https://placekitten.com/320/240",
            text="Check out this cat 😺",
            status=MessageStatus.READ,
            created_at=ago(54),
        ),
        Message(
            id="m4",
            conversation_id="c_group_general",
            sender_id="u_charlie",
            type=MessageType.TEXT,
            text="Welcome to the General group!",
            status=MessageStatus.SENT,
            created_at=ago(30),
        ),
        Message(
            id="m5",
            conversation_id="c_group_general",
            sender_id="u_bob",
            type=MessageType.FILE,
            media_url="https://example.com/files/design.pdf",
            text="Here's the design doc PDF.",
            status=MessageStatus.DELIVERED,
            created_at=ago(25),
        ),
        Message(
            id="m6",
            conversation_id="c_ai_helper",
            sender_id="u_alice",
            type=MessageType.TEXT,
            text="Hey Assistant, summarize today's chat progress.",
            status=MessageStatus.SENT,
            created_at=ago(10),
        ),
        Message(
            id="m7",
            conversation_id="c_ai_helper",
            sender_id="u_bot",
            type=MessageType.TEXT,
            text="Summary: Schema finalized, seed data created, next step is auth + sockets.",
            status=MessageStatus.DELIVERED,
            created_at=ago(9),
        ),
    ]


def seed(database: Database, password_hasher: PasswordHasher, *, now: datetime | None = None) -> None:
    """Replace all chat data with the fixture set. Development only."""

    now = now or datetime.now(UTC)
    with database.session_scope() as session:
        # FK order
        for model in (Message, Participant, Conversation, User):
            session.execute(delete(model))

        session.add_all(
            User(
                id=user_id,
                email=email,
                password_hash=password_hasher.hash(password),
                name=name,
                avatar_url=avatar_url,
                is_email_verified=True,
                created_at=now,
            )
            for user_id, email, password, name, avatar_url in SEED_USERS
        )
        session.add_all(
            Conversation(id=conv_id, type=conv_type, title=title)
            for conv_id, conv_type, title in SEED_CONVERSATIONS
        )
        session.flush()

        session.add_all(
            Participant(id=part_id, user_id=user_id, conversation_id=conv_id, role=role)
            for part_id, user_id, conv_id, role in SEED_PARTICIPANTS
        )
        session.flush()

        messages = _messages(now)
        # m2 replies to m1, so m1 has to exist first
        session.add(messages[0])
        session.flush()
        session.add_all(messages[1:])

    logger.info(
        f"seed: users={len(SEED_USERS)} conversations={len(SEED_CONVERSATIONS)} "
        f"participants={len(SEED_PARTICIPANTS)} messages=7"
    )


def main() -> None:
    parser = argparse.ArgumentParser(description="Reset the database to development fixtures")
    parser.add_argument(
        "--database-url",
        type=str,
        default=None,
        help="Overrides DATABASE_URL",
    )
    args = parser.parse_args()

    config = load_config()
    setup_logging(config.log_level)
    database = (
        Database(args.database_url)
        if args.database_url
        else Database.from_config(config.database)
    )
    try:
        database.create_all()
        seed(database, WerkzeugPasswordHasher())
    finally:
        database.dispose()
    print("Seeded: users, conversations, participants, messages")


if __name__ == "__main__":
    main()
