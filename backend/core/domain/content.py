"""Content domain entities shared by the agents and the orchestrator."""
from dataclasses import asdict, dataclass, field
from datetime import UTC, datetime
from enum import Enum
from typing import Any, Optional


class Tone(str, Enum):
    """Blog writing tone."""
    ACADEMIC = "academic"
    CASUAL = "casual"
    PROFESSIONAL = "professional"


class GenerationStep(str, Enum):
    """Pipeline step reported in progress events."""
    RESEARCH = "research"
    CONTENT = "content"
    IMAGES = "images"
    REFERENCES = "references"
    COMPLETE = "complete"
    ERROR = "error"


@dataclass
class ResearchResult:
    """A news article or web page found for a topic."""

    title: str
    url: str
    snippet: str
    source: str
    published_at: Optional[str] = None

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass
class ImageData:
    """A stock photo candidate with attribution."""

    id: str
    url: str
    alt: str
    photographer: str
    photographer_username: str
    download_url: str
    relevance_score: int = 0

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass
class Reference:
    """A citation rendered under the References heading."""

    title: str
    url: str
    source: str
    published_at: Optional[str] = None

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass
class ReferenceList:
    references: list[Reference]
    total_count: int
    generated_at: str


@dataclass
class TokenUsage:
    input: int = 0
    output: int = 0

    @property
    def total(self) -> int:
        return self.input + self.output

    def to_dict(self) -> dict[str, int]:
        return {"input": self.input, "output": self.output, "total": self.total}


@dataclass
class BlogContent:
    """Parsed LLM output for a blog post."""

    title: str
    content: str
    keywords: list[str]
    word_count: int
    sections: list[str]
    metadata: dict[str, Any] = field(default_factory=dict)


@dataclass
class EditResult:
    title: str
    content: str


@dataclass
class BlogGenerationRequest:
    topic: str
    tone: Tone
    max_words: int
    include_images: bool = True

    def __post_init__(self):
        if isinstance(self.tone, str):
            self.tone = Tone(self.tone)


@dataclass
class BlogGenerationResult:
    """Final pipeline output."""

    title: str
    content: str
    images: list[ImageData]
    all_images: list[ImageData]
    references: list[Reference]
    metadata: dict[str, Any]

    def to_dict(self) -> dict[str, Any]:
        return {
            "title": self.title,
            "content": self.content,
            "images": [image.to_dict() for image in self.images],
            "all_images": [image.to_dict() for image in self.all_images],
            "references": [reference.to_dict() for reference in self.references],
            "metadata": self.metadata,
        }


@dataclass
class ProgressState:
    """One progress event emitted while a blog is generated."""

    step: GenerationStep
    progress: float
    message: str
    timestamp: str = field(default_factory=lambda: datetime.now(UTC).isoformat())

    def to_dict(self) -> dict[str, Any]:
        return {
            "step": self.step.value,
            "progress": self.progress,
            "message": self.message,
            "timestamp": self.timestamp,
        }
