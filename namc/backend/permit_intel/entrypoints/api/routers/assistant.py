# permit_intel/entrypoints/api/routers/assistant.py
from __future__ import annotations

from fastapi import APIRouter, Depends

from ..deps import get_assistant, require_api_key
from ....schemas import ChatIn, ChatOut
from ....service_layer.assistant import ConstructionAssistant

router = APIRouter(tags=["assistant"], dependencies=[Depends(require_api_key)])


@router.post("/assistant/chat", response_model=ChatOut)
async def chat(
    body: ChatIn,
    assistant: ConstructionAssistant = Depends(get_assistant),
) -> ChatOut:
    reply = await assistant.chat(body.message, body.history_turns())
    return ChatOut(reply=reply)
