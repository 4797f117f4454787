"""
Blog generation pipeline.

Runs research, drafting, image placement and referencing in a fixed order and
optionally reports weighted progress for streaming to the browser.
"""

import asyncio
import json
import logging
import time
from datetime import UTC, datetime
from typing import Any, AsyncIterator, Callable, Dict, List, Optional

from core.domain import (
    BlogGenerationRequest,
    BlogGenerationResult,
    GenerationStep,
    ImageData,
    ProgressState,
)
from services.content_agent import ContentGenerationAgent
from services.image_agent import ImageRetrievalAgent
from services.reference_agent import ReferenceManagementAgent
from services.research_agent import ResearchAgent

logger = logging.getLogger(__name__)

STEP_WEIGHTS = [
    (GenerationStep.RESEARCH, 0.2),
    (GenerationStep.CONTENT, 0.5),
    (GenerationStep.IMAGES, 0.2),
    (GenerationStep.REFERENCES, 0.1),
]

ProgressCallback = Callable[[ProgressState], None]


class BlogGenerationError(Exception):
    """Raised when any pipeline step fails."""
    pass


class _ProgressReporter:
    """Turns step names into cumulative progress fractions."""

    def __init__(self, on_progress: ProgressCallback):
        self.on_progress = on_progress
        self.current = 0

    def _fraction(self) -> float:
        done = sum(weight for _, weight in STEP_WEIGHTS[: self.current])
        return min(done + STEP_WEIGHTS[self.current][1], 1.0)

    def report(self, step: GenerationStep, message: str) -> None:
        if step == GenerationStep.COMPLETE:
            progress = 1.0
        else:
            indexes = [i for i, (name, _) in enumerate(STEP_WEIGHTS) if name == step]
            if indexes and indexes[0] > self.current:
                self.current = indexes[0]
            progress = self._fraction()
        self.on_progress(ProgressState(step=step, progress=round(progress, 4), message=message))


def sse_frame(payload: Dict[str, Any]) -> str:
    return f"data: {json.dumps(payload)}\n\n"


class AgentOrchestrator:
    """Coordinates the four agents for one generation request."""

    def __init__(
        self,
        research_agent: Optional[ResearchAgent] = None,
        content_agent: Optional[ContentGenerationAgent] = None,
        image_agent: Optional[ImageRetrievalAgent] = None,
        reference_agent: Optional[ReferenceManagementAgent] = None,
    ):
        self.research_agent = research_agent or ResearchAgent()
        self.content_agent = content_agent or ContentGenerationAgent()
        self.image_agent = image_agent or ImageRetrievalAgent()
        self.reference_agent = reference_agent or ReferenceManagementAgent()

    async def generate_blog(self, request: BlogGenerationRequest) -> BlogGenerationResult:
        return await self._run(request, None)

    async def generate_blog_with_progress(
        self, request: BlogGenerationRequest, on_progress: ProgressCallback
    ) -> BlogGenerationResult:
        reporter = _ProgressReporter(on_progress)
        try:
            return await self._run(request, reporter)
        except BlogGenerationError as e:
            reporter.report(GenerationStep.ERROR, str(e))
            raise

    async def stream_blog_generation(self, request: BlogGenerationRequest) -> AsyncIterator[str]:
        """
        Yield SSE frames: one per progress update, then a terminal
        ``complete`` or ``error`` frame.
        """
        queue: asyncio.Queue = asyncio.Queue()

        async def produce():
            try:
                result = await self.generate_blog_with_progress(
                    request, lambda state: queue.put_nowait(state.to_dict())
                )
                queue.put_nowait({"type": "complete", "result": result.to_dict()})
            except BlogGenerationError as e:
                queue.put_nowait({"type": "error", "error": str(e)})
            finally:
                queue.put_nowait(None)

        task = asyncio.create_task(produce())
        try:
            while (payload := await queue.get()) is not None:
                yield sse_frame(payload)
        finally:
            if not task.done():
                task.cancel()

    @staticmethod
    def get_generation_summary(request: BlogGenerationRequest) -> Dict[str, Any]:
        return {
            "topic": request.topic,
            "tone": request.tone.value,
            "max_words": request.max_words,
            "include_images": request.include_images,
            "estimated_time_ms": 30000 + request.max_words * 50,
            "steps": [
                "Research topic using News API and Google Custom Search",
                "Generate blog content using Claude",
                "Find relevant images using Unsplash API",
                "Extract and format references",
            ],
            "requirements": [
                "NEWS_API_KEY",
                "GOOGLE_SEARCH_API_KEY and GOOGLE_SEARCH_ENGINE_ID",
                "ANTHROPIC_API_KEY",
                "UNSPLASH_ACCESS_KEY",
            ],
        }

    async def _run(
        self, request: BlogGenerationRequest, reporter: Optional[_ProgressReporter]
    ) -> BlogGenerationResult:
        def report(step: GenerationStep, message: str) -> None:
            if reporter:
                reporter.report(step, message)

        started = time.perf_counter()
        logger.info("Starting blog generation for topic %r", request.topic)
        try:
            report(GenerationStep.RESEARCH, "Researching your topic...")
            research = await self.research_agent.research_topic(request.topic)
            report(GenerationStep.RESEARCH, f"Found {len(research)} sources")

            report(GenerationStep.CONTENT, "Generating blog content...")
            blog = await self.content_agent.generate_blog(
                request.topic, request.tone, request.max_words, research
            )
            report(GenerationStep.CONTENT, f"Generated {blog.word_count} words")
            content = blog.content

            all_images: List[ImageData] = []
            if request.include_images:
                report(GenerationStep.IMAGES, "Finding relevant images...")
                report(GenerationStep.IMAGES, f"Using keywords: {', '.join(blog.keywords)}")
                all_images = await self.image_agent.find_relevant_images(
                    content, request.topic, blog.keywords
                )
                report(GenerationStep.IMAGES, f"Found {len(all_images)} total images, using all for embedding")
                content = await self.image_agent.embed_images_in_markdown(content, all_images)

            report(GenerationStep.REFERENCES, "Extracting references...")
            reference_list = await self.reference_agent.extract_references(research, content)
            references = reference_list.references
            report(GenerationStep.REFERENCES, f"Extracted {len(references)} references")
            content = await self.reference_agent.embed_references_in_blog(content, references)
        except Exception as e:
            logger.error("Blog generation failed for %r: %s", request.topic, e, exc_info=True)
            raise BlogGenerationError(f"Blog generation failed: {e}") from e

        report(GenerationStep.COMPLETE, "Blog generation complete!")
        return BlogGenerationResult(
            title=blog.title,
            content=content,
            images=all_images,
            all_images=all_images,
            references=references,
            metadata={
                "generation_time": int((time.perf_counter() - started) * 1000),
                "word_count": blog.word_count,
                "model_used": blog.metadata.get("model_used"),
                "generated_at": datetime.now(UTC).isoformat(),
                "research_sources": len(research),
                "images_found": len(all_images),
                "references_count": len(references),
            },
        )
