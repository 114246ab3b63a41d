# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from .session import Base, Database
from .models import Conversation, Message, Participant, User

__all__ = ["Base", "Conversation", "Database", "Message", "Participant", "User"]
