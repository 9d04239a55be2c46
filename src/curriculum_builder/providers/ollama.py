# generative provider backed by an ollama hosted llm
import logging
from contextlib import closing
from typing import Iterator, Optional

from .base import GenerationProvider, FragmentCallback
from ..errors import GenerationFailure
from ..llm_service import OllamaLLMService
from ..models import Curriculum
from ..prompts import build_curriculum_prompt
from ..response_parser import parse_curriculum_response

logger = logging.getLogger(__name__)


class OllamaProvider(GenerationProvider):
    """Generates curricula by prompting an LLM and interpreting its JSON answer"""

    name = "ollama"

    def __init__(self, llm_service: Optional[OllamaLLMService] = None):
        self.llm_service = llm_service or OllamaLLMService()

    def identify(self) -> str:
        return self.name

    def is_available(self) -> bool:
        return self.llm_service.check_availability()

    def generate(self, document_text: str) -> Curriculum:
        logger.info(f"OllamaProvider: Generating curriculum with model {self.llm_service.model}")
        try:
            text = self.llm_service.generate_text(build_curriculum_prompt(document_text))
            logger.debug(f"Received response from Ollama: {len(text)} chars")
            curriculum = parse_curriculum_response(text)
        except GenerationFailure:
            raise
        except Exception as e:
            logger.error(f"OllamaProvider: Failed to generate curriculum: {str(e)}", exc_info=True)
            raise GenerationFailure() from e

        logger.info(f"OllamaProvider: Curriculum generated with {len(curriculum.modules)} modules")
        return curriculum

    def generate_streaming(self, document_text: str, on_fragment: FragmentCallback) -> Curriculum:
        logger.info(f"OllamaProvider: Streaming curriculum with model {self.llm_service.model}")
        fragments = []
        # consumer errors from on_fragment propagate unchanged and close the backend stream
        with closing(self._backend_fragments(build_curriculum_prompt(document_text))) as stream:
            for index, fragment in enumerate(stream):
                fragments.append(fragment)
                on_fragment(fragment, index)
        logger.debug(f"Streaming complete from Ollama: {len(fragments)} fragments")
        curriculum = parse_curriculum_response("".join(fragments))

        logger.info(f"OllamaProvider: Streaming curriculum generated with {len(curriculum.modules)} modules")
        return curriculum

    # relay backend fragments, turning backend failures into GenerationFailure
    def _backend_fragments(self, prompt: str) -> Iterator[str]:
        try:
            yield from self.llm_service.stream_text(prompt)
        except Exception as e:
            logger.error(f"OllamaProvider: Failed to stream curriculum: {str(e)}", exc_info=True)
            raise GenerationFailure() from e
