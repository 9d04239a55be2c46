# provider contract shared by the mock and llm backed generators
from abc import ABC, abstractmethod
from typing import Callable

from ..models import Curriculum

FragmentCallback = Callable[[str, int], None]


class GenerationProvider(ABC):
    """Turns extracted document text into a normalized Curriculum"""

    @abstractmethod
    def identify(self) -> str:
        """Stable lowercase provider name used for caching, logging and client metadata"""

    @abstractmethod
    def generate(self, document_text: str) -> Curriculum:
        """Produce a full curriculum or raise GenerationFailure"""

    def generate_streaming(self, document_text: str, on_fragment: FragmentCallback) -> Curriculum:
        """Same contract as generate, reporting fragments as they arrive.

        Providers without native streaming emit the serialized result as the
        single fragment of index 0.
        """
        curriculum = self.generate(document_text)
        on_fragment(curriculum.model_dump_json(by_alias=True), 0)
        return curriculum

    def is_available(self) -> bool:
        """Whether the backend can currently serve requests"""
        return True
