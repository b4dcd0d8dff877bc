"""Wire models: events sent to clients and the extraction result payload."""

from datetime import datetime
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, model_serializer
from pydantic.alias_generators import to_camel


class Link(BaseModel):
    text: str
    href: str | None = None


class Image(BaseModel):
    alt: str | None = None
    src: str | None = None


class ExtractionResult(BaseModel):
    """Structured data pulled from one page snapshot.

    Strategy fields stay ``None`` unless their keyword fired and are left out
    of the serialized form in that case.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    title: str | None = None
    all_headings: list[str] | None = None
    links: list[Link] | None = None
    images: list[Image] | None = None
    tables: list[list[list[str]]] | None = None
    paragraphs: list[str] | None = None
    lists: list[list[str]] | None = None
    ai_analysis: str | None = None
    url: str
    timestamp: datetime

    @model_serializer(mode="wrap")
    def _drop_unmatched(self, handler: Any) -> dict[str, Any]:
        return {key: value for key, value in handler(self).items() if value is not None}


class TextContent(BaseModel):
    type: Literal["text"] = "text"
    text: str


class ChatMessage(BaseModel):
    role: Literal["assistant", "user"] = "assistant"
    content: list[TextContent]


class ConnectedEvent(BaseModel):
    type: Literal["connected"] = "connected"
    message: str = "Server ready"


class MessageEvent(BaseModel):
    type: Literal["message"] = "message"
    message: ChatMessage


class BrowserNavigateEvent(BaseModel):
    type: Literal["browser_navigate"] = "browser_navigate"
    url: str


class ExtractionResultEvent(BaseModel):
    type: Literal["extraction_result"] = "extraction_result"
    data: ExtractionResult


class CompleteEvent(BaseModel):
    type: Literal["complete"] = "complete"


class ErrorEvent(BaseModel):
    type: Literal["error"] = "error"
    error: str


Event = (
    ConnectedEvent
    | MessageEvent
    | BrowserNavigateEvent
    | ExtractionResultEvent
    | CompleteEvent
    | ErrorEvent
)
