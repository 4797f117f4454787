"""
Direct access to the individual agents: research, images and references.
"""

import logging
from datetime import UTC, datetime
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query, status

from api.dependencies import get_image_agent, get_reference_agent, get_research_agent
from api.schemas.generation import (
    ImageSearchRequest,
    ImageSearchResponse,
    ReferencesRequest,
    ReferencesResponse,
    ResearchRequest,
    ResearchResponse,
    SearchImagesRequest,
    SearchImagesResponse,
)
from services.image_agent import ImageRetrievalAgent
from services.reference_agent import ReferenceManagementAgent
from services.research_agent import ResearchAgent

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Agents"])

MIN_TOPIC_LENGTH = 3
MAX_TOPIC_LENGTH = 200


def _now() -> str:
    return datetime.now(UTC).isoformat()


# ============================================================================
# Research
# ============================================================================


async def _research(agent: ResearchAgent, topic: str) -> dict:
    if len(topic) < MIN_TOPIC_LENGTH or len(topic) > MAX_TOPIC_LENGTH:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Topic must be between 3 and 200 characters",
        )
    try:
        run = await agent.run(topic)
    except Exception as e:
        logger.error("Research API error for %r: %s", topic, e, exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to research topic",
        )

    results = run.final
    return {
        "topic": topic,
        "results": [result.to_dict() for result in results],
        "summary": run.summary(topic),
        "count": len(results),
        "timestamp": _now(),
    }


@router.post("/research", response_model=ResearchResponse)
async def research_topic(
    body: ResearchRequest,
    agent: Annotated[ResearchAgent, Depends(get_research_agent)],
):
    return await _research(agent, body.topic)


@router.get("/research", response_model=ResearchResponse)
async def research_topic_get(
    agent: Annotated[ResearchAgent, Depends(get_research_agent)],
    topic: str = Query(...),
):
    return await _research(agent, topic)


# ============================================================================
# Images
# ============================================================================


@router.post("/images", response_model=ImageSearchResponse)
async def find_images(
    body: ImageSearchRequest,
    agent: Annotated[ImageRetrievalAgent, Depends(get_image_agent)],
):
    """Manual query search, or concept-based search over a post."""
    if not body.blog_content and not body.query:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Either blogContent and topic, or query is required",
        )
    if not body.query and not body.topic:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Topic is required when providing blogContent",
        )

    try:
        if body.query:
            images = await agent.search_images_by_query(body.query)
            summary = {
                "query": body.query,
                "total_images_found": len(images),
                "type": "manual_search",
            }
        else:
            images = await agent.find_relevant_images(body.blog_content, body.topic)
            summary = await agent.get_image_search_summary(body.blog_content, body.topic)
    except Exception as e:
        logger.error("Image search API error: %s", e, exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to search images",
        )

    return {
        "images": [image.to_dict() for image in images],
        "summary": summary,
        "count": len(images),
        "timestamp": _now(),
    }


@router.get("/images", response_model=ImageSearchResponse)
async def find_images_get(
    agent: Annotated[ImageRetrievalAgent, Depends(get_image_agent)],
    query: str = Query(..., min_length=1),
):
    try:
        images = await agent.search_images_by_query(query)
    except Exception as e:
        logger.error("Image search API error: %s", e, exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to search images",
        )
    return {
        "images": [image.to_dict() for image in images],
        "query": query,
        "count": len(images),
        "timestamp": _now(),
    }


async def _search_images(agent: ImageRetrievalAgent, query: str | None) -> dict:
    if not query:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Missing query parameter",
        )
    try:
        images = await agent.search_images_by_query(query)
    except Exception as e:
        logger.error("Image search error: %s", e, exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to search images",
        )
    return {"images": [image.to_dict() for image in images]}


@router.post("/search-images", response_model=SearchImagesResponse)
async def search_images(
    body: SearchImagesRequest,
    agent: Annotated[ImageRetrievalAgent, Depends(get_image_agent)],
):
    """Image picker search used when swapping a single image."""
    return await _search_images(agent, body.query)


@router.get("/search-images", response_model=SearchImagesResponse)
async def search_images_get(
    agent: Annotated[ImageRetrievalAgent, Depends(get_image_agent)],
    q: str | None = Query(None),
):
    return await _search_images(agent, q)


# ============================================================================
# References
# ============================================================================


@router.post("/references", response_model=ReferencesResponse)
async def process_references(
    body: ReferencesRequest,
    agent: Annotated[ReferenceManagementAgent, Depends(get_reference_agent)],
):
    """Build, embed and validate a citation list from research results."""
    try:
        reference_list = await agent.extract_references(body.research_data, body.blog_content)
        references = reference_list.references
        markdown = agent.generate_markdown_references(references)
        with_references = await agent.embed_references_in_blog(body.blog_content, references)
        validation = agent.validate_references(references)
        summary = await agent.get_reference_summary(body.research_data)
    except Exception as e:
        logger.error("Reference management error: %s", e, exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to process references",
        )

    return {
        "references": [reference.to_dict() for reference in references],
        "markdown_references": markdown,
        "blog_with_references": with_references,
        "summary": summary,
        "validation": validation,
        "metadata": {
            "total_references": reference_list.total_count,
            "generated_at": reference_list.generated_at,
        },
    }
