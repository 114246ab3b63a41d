# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Vocabulary shared by conversations, participants and messages."""

from __future__ import annotations

from enum import Enum


class ConversationType(str, Enum):
    DIRECT = "DIRECT"
    GROUP = "GROUP"
    AI = "AI"


class ParticipantRole(str, Enum):
    MEMBER = "MEMBER"
    ADMIN = "ADMIN"


class MessageType(str, Enum):
    TEXT = "TEXT"
    IMAGE = "IMAGE"
    FILE = "FILE"


class MessageStatus(str, Enum):
    SENT = "SENT"
    DELIVERED = "DELIVERED"
    READ = "READ"
