import logging
from collections.abc import AsyncIterator, Callable
from contextlib import aclosing
from dataclasses import dataclass

from coda.generators.parsing import extract_instructions, parse_file_blocks
from coda.generators.prompts import build_generation_prompt
from coda.providers.base import AIProvider, AIRequest, ChatMessage
from coda.schemas.generation import GeneratedFile, GenerationRequest, GenerationResult, Language

logger = logging.getLogger(__name__)

# Low temperature keeps code output close to the requested conventions.
GENERATION_TEMPERATURE = 0.3
GENERATION_MAX_TOKENS = 8000


@dataclass(frozen=True)
class ProjectTemplate:
    project_type: str
    system_prompt: str
    primary_language: Language
    languages: frozenset[str]
    instruction_labels: tuple[str, ...]
    default_instructions: str
    next_steps: tuple[str, ...]
    # Builds the fixed skeleton, given the raw reply to borrow fenced blocks from.
    skeleton: Callable[[str], list[GeneratedFile]]


class CodeGenerator:
    def __init__(self, template: ProjectTemplate) -> None:
        self.template = template

    def build_request(self, request: GenerationRequest, *, stream: bool = False) -> AIRequest:
        user_prompt = build_generation_prompt(request.description, request.features, request.custom_instructions)
        return AIRequest(
            messages=[
                ChatMessage(role="system", content=self.template.system_prompt),
                ChatMessage(role="user", content=user_prompt),
            ],
            temperature=GENERATION_TEMPERATURE,
            max_tokens=GENERATION_MAX_TOKENS,
            stream=stream,
        )

    def parse_generated_code(self, content: str) -> list[GeneratedFile]:
        files = parse_file_blocks(content, self.template.primary_language, self.template.languages)
        if not files:
            logger.info("No labelled file blocks in reply; using the %s skeleton", self.template.project_type)
            files = self.template.skeleton(content)
        return files

    def build_result(self, content: str) -> GenerationResult:
        return GenerationResult(
            files=self.parse_generated_code(content),
            instructions=extract_instructions(
                content, self.template.instruction_labels, self.template.default_instructions
            ),
            next_steps=list(self.template.next_steps),
        )

    async def generate(self, request: GenerationRequest, provider: AIProvider) -> GenerationResult:
        """Ask *provider* for the project and turn the reply into files.

        Provider failures propagate unchanged; nothing is retried here.
        """
        logger.info("Generating %s project with %s", self.template.project_type, provider.name)
        response = await provider.generate(self.build_request(request))
        result = self.build_result(response.content)
        logger.info("Generated %d file(s) for %s", len(result.files), self.template.project_type)
        return result

    async def stream(self, request: GenerationRequest, provider: AIProvider) -> AsyncIterator[str]:
        """Relay the provider's text deltas; feed the joined text to ``build_result``."""
        logger.info("Streaming %s project with %s", self.template.project_type, provider.name)
        async with aclosing(provider.generate_stream(self.build_request(request, stream=True))) as fragments:
            async for fragment in fragments:
                yield fragment
