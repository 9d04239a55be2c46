# deterministic provider backed by the heuristic parser
import time
import logging

from .base import GenerationProvider
from ..heuristic_parser import HeuristicDocumentParser
from ..hierarchy import build_curriculum
from ..models import Curriculum

logger = logging.getLogger(__name__)


class MockProvider(GenerationProvider):
    """Rule based provider for development, demos and tests, no network needed"""

    name = "mock"

    def __init__(self, delay_seconds: float = 0.0):
        self.delay_seconds = delay_seconds
        self.parser = HeuristicDocumentParser()

    def identify(self) -> str:
        return self.name

    def generate(self, document_text: str) -> Curriculum:
        logger.info("MockProvider: Generating curriculum from content")

        # simulate backend latency when configured
        if self.delay_seconds > 0:
            time.sleep(self.delay_seconds)

        curriculum = build_curriculum(self.parser.parse(document_text))

        logger.info(
            f"MockProvider: Curriculum generated with {len(curriculum.modules)} modules, "
            f"{curriculum.count_topics()} topics"
        )
        return curriculum
