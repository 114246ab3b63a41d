# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from .entities import (ConversationType, MessageStatus, MessageType,
                       ParticipantRole)

__all__ = ["ConversationType", "MessageStatus", "MessageType", "ParticipantRole"]
