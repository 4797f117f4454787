# Domain Entities
# Pure business objects with no external dependencies
from .content import (
    BlogContent,
    BlogGenerationRequest,
    BlogGenerationResult,
    EditResult,
    GenerationStep,
    ImageData,
    ProgressState,
    Reference,
    ReferenceList,
    ResearchResult,
    TokenUsage,
    Tone,
)

__all__ = [
    "Tone",
    "GenerationStep",
    "ResearchResult",
    "ImageData",
    "Reference",
    "ReferenceList",
    "TokenUsage",
    "BlogContent",
    "EditResult",
    "BlogGenerationRequest",
    "BlogGenerationResult",
    "ProgressState",
]
