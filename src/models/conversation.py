"""Pending conversation state models

Each pending multi-step flow is a tagged variant: the ``kind`` field picks the
model, the remaining fields are that flow's typed context.
"""
from datetime import datetime
from enum import Enum
from typing import Annotated, Literal, Optional, Union
from pydantic import BaseModel, Field, TypeAdapter


class ConversationKind(str, Enum):
    """Supported multi-step flows"""
    AWAITING_NAME = "awaiting_name"
    AWAITING_CUSTOM_STREAK = "awaiting_custom_streak"


class AwaitingName(BaseModel):
    """Join flow: next free-text message is the display name"""
    kind: Literal["awaiting_name"] = "awaiting_name"


class AwaitingCustomStreak(BaseModel):
    """Admin flow: next free-text message is the streak value for target_user_id"""
    kind: Literal["awaiting_custom_streak"] = "awaiting_custom_streak"
    target_user_id: int = Field(gt=0)


ConversationState = Annotated[
    Union[AwaitingName, AwaitingCustomStreak],
    Field(discriminator="kind"),
]

conversation_state_adapter: TypeAdapter = TypeAdapter(ConversationState)


class PendingConversation(BaseModel):
    """Outstanding flow for one (user, chat) pair"""
    user_id: int
    chat_id: int
    state: ConversationState
    created_at: Optional[datetime] = None

    @property
    def kind(self) -> ConversationKind:
        return ConversationKind(self.state.kind)

    def context_payload(self) -> dict:
        """Context stored next to the kind tag"""
        return self.state.model_dump(mode="json", exclude={"kind"})

    @classmethod
    def from_row(cls, row: dict) -> "PendingConversation":
        state = conversation_state_adapter.validate_python(
            {"kind": row["kind"], **(row.get("context") or {})}
        )
        return cls(
            user_id=row["user_id"],
            chat_id=row["chat_id"],
            state=state,
            created_at=row.get("created_at"),
        )
