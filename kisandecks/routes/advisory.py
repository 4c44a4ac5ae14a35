"""AI advisory chat and image diagnosis.

Chat history is stored per client session id; each answer is generated by an
OpenAI-compatible chat completions provider with a system prompt chosen by
advisory type. Crop and fruit prompts carry live mandi prices.
"""

import base64
import logging
from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends, File, Form, UploadFile
from pydantic import BaseModel, Field, field_validator
from sqlalchemy.orm import Session

from ..database import get_db
from ..errors import ValidationError
from ..models import AdvisoryChat
from ..services.advisory_prompts import LIVE_DATA_TYPES, build_system_prompt, vision_prompt
from ..services.market_data import MarketDataService
from ..services.openai_client import OpenAIChatClient, get_openai_client
from ..shared.validators import validate_choice
from ..utils.media_storage import resolve_media_path, save_upload, upload_url
from ..utils.sanitization import clean_text

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/advisory", tags=["Advisory"])

ADVISORY_CATEGORIES = ("crop", "soil", "pest", "disease", "irrigation")
ADVISORY_TYPES = ("crop", "cattle", "soil", "water", "fruits", "general")
VISION_TYPES = ("crop", "cattle")

HISTORY_WINDOW = 10
CHAT_MAX_TOKENS = 1024
VISION_MAX_TOKENS = 1500

CHAT_FALLBACK = "Sorry, I could not generate a response. Please try again."
VISION_FALLBACK = "Sorry, I could not analyze the image. Please try again."


class AdvisoryQuery(BaseModel):
    sessionId: str = Field(min_length=1, max_length=50)
    message: str = Field(min_length=1, max_length=4000)
    category: Optional[str] = None
    advisoryType: Optional[str] = None

    @field_validator("message")
    @classmethod
    def validate_message(cls, v):
        if not v.strip():
            raise ValueError("Please enter your question")
        return v

    @field_validator("category")
    @classmethod
    def validate_category(cls, v):
        return validate_choice(v, ADVISORY_CATEGORIES, "category")

    @field_validator("advisoryType")
    @classmethod
    def validate_advisory_type(cls, v):
        return validate_choice(v, ADVISORY_TYPES, "advisoryType")


class AdvisoryChatResponse(BaseModel):
    id: int
    sessionId: str
    role: str
    content: str
    category: Optional[str] = None
    advisoryType: Optional[str] = None
    imageUrl: Optional[str] = None
    timestamp: datetime

    @classmethod
    def from_model(cls, chat: AdvisoryChat) -> "AdvisoryChatResponse":
        return cls(
            id=chat.id,
            sessionId=chat.session_id,
            role=chat.role,
            content=chat.content,
            category=chat.category,
            advisoryType=chat.advisory_type,
            imageUrl=chat.image_url,
            timestamp=chat.timestamp,
        )


def _save_chat(db: Session, **values) -> AdvisoryChat:
    chat = AdvisoryChat(**values)
    db.add(chat)
    db.commit()
    db.refresh(chat)
    return chat


def _history(db: Session, session_id: str) -> list[AdvisoryChat]:
    return (
        db.query(AdvisoryChat)
        .filter(AdvisoryChat.session_id == session_id)
        .order_by(AdvisoryChat.timestamp, AdvisoryChat.id)
        .all()
    )


@router.post("", response_model=AdvisoryChatResponse)
async def ask_advisory(
    data: AdvisoryQuery,
    db: Session = Depends(get_db),
    ai: OpenAIChatClient = Depends(get_openai_client),
):
    """Store the farmer's question and answer it with the last 10 messages as context"""
    advisory_type = data.advisoryType or "general"
    message = clean_text(data.message, 4000)
    _save_chat(
        db,
        session_id=data.sessionId,
        role="user",
        content=message,
        category=data.category,
        advisory_type=advisory_type,
    )

    live_context = MarketDataService(db).live_context(message) if advisory_type in LIVE_DATA_TYPES else ""
    messages = [{"role": "system", "content": build_system_prompt(advisory_type, live_context)}]
    messages += [
        {"role": chat.role, "content": chat.content} for chat in _history(db, data.sessionId)[-HISTORY_WINDOW:]
    ]

    logger.info(f"🌾 Advisory ({advisory_type}) for session {data.sessionId}, {len(messages) - 1} messages")
    answer = await ai.complete(messages, max_tokens=CHAT_MAX_TOKENS)

    reply = _save_chat(
        db,
        session_id=data.sessionId,
        role="assistant",
        content=answer or CHAT_FALLBACK,
        category=data.category,
        advisory_type=advisory_type,
    )
    return AdvisoryChatResponse.from_model(reply)


@router.get("/{session_id}", response_model=list[AdvisoryChatResponse])
async def get_history(session_id: str, db: Session = Depends(get_db)):
    return [AdvisoryChatResponse.from_model(chat) for chat in _history(db, session_id)]


@router.post("/vision", response_model=AdvisoryChatResponse)
async def diagnose_image(
    image: Optional[UploadFile] = File(None),
    sessionId: Optional[str] = Form(None),
    message: Optional[str] = Form(None),
    advisoryType: Optional[str] = Form("crop"),
    db: Session = Depends(get_db),
    ai: OpenAIChatClient = Depends(get_openai_client),
):
    """Diagnose a crop or animal photo with the vision model"""
    if image is None or not image.filename:
        raise ValidationError("No image uploaded", "कोई फोटो अपलोड नहीं की गई")
    if not sessionId:
        raise ValidationError("Session ID is required", "सेशन ID आवश्यक है")
    advisory_type = advisoryType if advisoryType in VISION_TYPES else "crop"

    try:
        relative_path, _ = await save_upload(image, "image", subfolder="advisory")
    except ValueError as e:
        raise ValidationError(str(e), "फोटो मान्य नहीं है") from e

    stored = resolve_media_path(relative_path)
    encoded = base64.b64encode(stored.read_bytes()).decode("ascii")
    question = clean_text(message, 4000) if message else None

    default_question = (
        "Please diagnose this animal's condition" if advisory_type == "cattle" else "Please diagnose this crop disease"
    )
    _save_chat(
        db,
        session_id=sessionId,
        role="user",
        content=question or default_question,
        advisory_type=advisory_type,
        image_url=upload_url(relative_path),
    )

    messages = [
        {"role": "system", "content": vision_prompt(advisory_type)},
        {
            "role": "user",
            "content": [
                {"type": "text", "text": question or "Please analyze this image and provide diagnosis"},
                {"type": "image_url", "image_url": {"url": f"data:{image.content_type};base64,{encoded}"}},
            ],
        },
    ]
    logger.info(f"📷 Vision advisory ({advisory_type}) for session {sessionId}")
    answer = await ai.complete(messages, max_tokens=VISION_MAX_TOKENS)

    reply = _save_chat(
        db,
        session_id=sessionId,
        role="assistant",
        content=answer or VISION_FALLBACK,
        advisory_type=advisory_type,
    )
    return AdvisoryChatResponse.from_model(reply)
