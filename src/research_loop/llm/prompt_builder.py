"""
Prompt builder for LLM requests.

Responsible for:
- Loading and rendering Jinja2 templates (research + next inquiry)
- Truncating long summaries before they are sent back to the model
- Constructing complete LLMGenerationRequest objects (with the research
  JSON Schema for structured output)
"""

import json
from pathlib import Path
from typing import Optional

import structlog
from jinja2 import Environment, FileSystemLoader

from research_loop.models.llm_models import LLMGenerationRequest

logger = structlog.get_logger(__name__)

DEFAULT_TEMPLATES_DIR = Path(__file__).parent / "templates"
DEFAULT_SCHEMA_PATH = DEFAULT_TEMPLATES_DIR / "research_schema.json"


class PromptBuilder:
    """
    Build LLM requests for the research service.

    Handles:
    - Template rendering (Jinja2)
    - Summary truncation for next-inquiry prompts
    - JSON Schema inclusion for research requests
    """

    def __init__(
        self,
        templates_dir: Path = DEFAULT_TEMPLATES_DIR,
        schema_path: Path = DEFAULT_SCHEMA_PATH,
        default_model: str = "qwen2.5:7b",
        default_temperature: float = 0.3,
        default_max_tokens: int = 4096,
        summary_char_limit: int = 20000,
        max_sources: int = 10,
    ):
        """
        Initialize prompt builder.

        Args:
            templates_dir: Directory containing prompt templates
            schema_path: Path to the research output JSON Schema
            default_model: Default model name
            default_temperature: Default temperature
            default_max_tokens: Default max tokens
            summary_char_limit: Max summary characters embedded in next-inquiry prompts
            max_sources: Number of sources requested from the model (0 to omit)
        """
        self.templates_dir = Path(templates_dir)
        self.schema_path = Path(schema_path)
        self.default_model = default_model
        self.default_temperature = default_temperature
        self.default_max_tokens = default_max_tokens
        self.summary_char_limit = summary_char_limit
        self.max_sources = max_sources

        self.jinja_env = Environment(
            loader=FileSystemLoader(str(self.templates_dir)),
            trim_blocks=True,
            lstrip_blocks=True,
            autoescape=False  # We're generating prompts, not HTML
        )

        self.research_template = self.jinja_env.get_template("research_prompt.txt")
        self.next_inquiry_template = self.jinja_env.get_template("next_inquiry_prompt.txt")

        with open(self.schema_path, 'r', encoding='utf-8') as f:
            self.json_schema = json.load(f)

        logger.info(
            "PromptBuilder initialized",
            templates_dir=str(self.templates_dir),
            schema_path=str(self.schema_path),
            default_model=default_model,
        )

    def build_research_prompt(self, subject: str) -> str:
        return self.research_template.render(
            subject=subject,
            max_sources=self.max_sources,
        ).strip()

    def build_next_inquiry_prompt(self, summary: str) -> str:
        """Render the next-inquiry prompt, truncating the summary if needed."""
        if len(summary) > self.summary_char_limit:
            logger.debug(
                "Truncating summary for next inquiry prompt",
                original_length=len(summary),
                limit=self.summary_char_limit,
            )
            summary = summary[: self.summary_char_limit]
        return self.next_inquiry_template.render(summary=summary).strip()

    def build_research_request(
        self,
        subject: str,
        model: Optional[str] = None,
        temperature: Optional[float] = None,
    ) -> LLMGenerationRequest:
        """Structured (JSON Schema constrained) request for a research artifact."""
        return LLMGenerationRequest(
            prompt=self.build_research_prompt(subject),
            model=model or self.default_model,
            temperature=temperature if temperature is not None else self.default_temperature,
            max_tokens=self.default_max_tokens,
            format_schema=self.json_schema,
        )

    def build_next_inquiry_request(
        self,
        summary: str,
        model: Optional[str] = None,
    ) -> LLMGenerationRequest:
        """Plain-text request for the next subject."""
        return LLMGenerationRequest(
            prompt=self.build_next_inquiry_prompt(summary),
            model=model or self.default_model,
            temperature=self.default_temperature,
            max_tokens=256,
        )
