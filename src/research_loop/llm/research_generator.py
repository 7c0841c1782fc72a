"""
LLM-backed research backend.

Implements ResearchBackend on top of an LLM client: the research service
uses it to answer /api/research and /api/next-inquiry. Each call makes one
generation request; the API layer wraps calls in the RetryEngine.
"""

import json
from typing import Optional

import structlog
from jsonschema import Draft7Validator

from research_loop.backend.base_client import ResearchBackend
from research_loop.llm.base_client import BaseLLMClient
from research_loop.llm.exceptions import LLMSchemaViolationError
from research_loop.llm.prompt_builder import PromptBuilder
from research_loop.models.research_models import ResearchArtifact, Source

logger = structlog.get_logger(__name__)


class ResearchGenerator(ResearchBackend):
    """
    Produce research artifacts and next subjects with an LLM.

    Research output is requested as JSON constrained by the prompt
    builder's schema and validated again on receipt: models do not
    always honour the format constraint.
    """

    def __init__(self, llm_client: BaseLLMClient, prompt_builder: PromptBuilder):
        self.llm_client = llm_client
        self.prompt_builder = prompt_builder
        self._validator = Draft7Validator(prompt_builder.json_schema)

    async def fetch_research(self, subject: str) -> ResearchArtifact:
        """
        Raises:
            LLMClientError: Generation failed
            LLMSchemaViolationError: Output is not valid JSON, violates the
                schema, or has a blank summary
        """
        request = self.prompt_builder.build_research_request(subject)
        response = await self.llm_client.generate(request)

        try:
            parsed = json.loads(response.content)
        except json.JSONDecodeError as e:
            raise LLMSchemaViolationError(
                "Research output is not valid JSON",
                details={"subject": subject, "parse_error": str(e)},
            ) from e

        errors = sorted(self._validator.iter_errors(parsed), key=lambda err: list(err.path))
        if errors:
            raise LLMSchemaViolationError(
                "Research output violates schema",
                details={
                    "subject": subject,
                    "errors": [err.message for err in errors[:5]],
                },
            )

        summary = parsed["summary"].strip()
        if not summary:
            logger.warning("Empty research summary returned", subject=subject)
            raise LLMSchemaViolationError(
                "Model did not return a summary",
                details={"subject": subject},
            )

        sources = tuple(
            Source(uri=raw["uri"].strip(), title=raw["title"].strip())
            for raw in parsed["sources"]
            if raw["uri"].strip() and raw["title"].strip()
        )
        logger.info(
            "Research completed successfully",
            subject=subject,
            sources_count=len(sources),
            model=response.model_version,
        )
        return ResearchArtifact(summary=summary, sources=sources)

    async def fetch_next_subject(self, summary: str) -> Optional[str]:
        request = self.prompt_builder.build_next_inquiry_request(summary)
        response = await self.llm_client.generate(request)

        next_subject = response.content.strip().strip('"').strip()
        if not next_subject:
            logger.warning("Empty next inquiry returned")
            return None

        logger.info("Next inquiry found", next_subject=next_subject)
        return next_subject

    async def health_check(self) -> bool:
        return await self.llm_client.health_check()

    async def close(self) -> None:
        await self.llm_client.close()
