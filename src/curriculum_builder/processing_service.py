import time
import logging
from typing import Callable, Optional

from .events import ProgressStatus, create_chunk_event, create_progress_event
from .models import GenerationResult
from .pdf_parser import extract_text
from .providers import ProviderRegistry, get_provider_registry
from .streaming import EventSink

logger = logging.getLogger(__name__)

# emit an ai_processing checkpoint every this many fragments
PROGRESS_EVERY_N_FRAGMENTS = 10


# curriculum service orchestrates extraction, provider selection and generation
class CurriculumService:
    def __init__(self, registry: Optional[ProviderRegistry] = None,
                 extractor: Callable[[bytes], str] = extract_text):
        self.registry = registry or get_provider_registry()
        self.extractor = extractor

    def run(self, document_bytes: bytes, provider_name: Optional[str] = None) -> GenerationResult:
        """Generate a curriculum from PDF bytes in one call"""
        start_time = time.monotonic()
        logger.info("Starting curriculum generation from PDF")

        # Step 1: Extract text, extraction errors propagate unchanged
        document_text = self.extractor(document_bytes)
        logger.debug(f"  ✓ Extracted {len(document_text)} chars")

        # Step 2: Generate with the configured provider
        provider = self.registry.resolve(provider_name)
        curriculum = provider.generate(document_text)

        elapsed = time.monotonic() - start_time
        logger.info(
            f"✓ Curriculum {curriculum.id} generated by {provider.identify()} "
            f"in {elapsed:.2f} seconds ({len(curriculum.modules)} modules)"
        )
        return GenerationResult(curriculum=curriculum, provider_name=provider.identify())

    def run_streaming(self, document_bytes: bytes, sink: EventSink,
                      provider_name: Optional[str] = None) -> GenerationResult:
        """Generate a curriculum while reporting checkpoints and fragments to sink.

        Errors are not caught here; the caller turns them into the terminal
        error event.
        """
        start_time = time.monotonic()
        logger.info("Starting streaming curriculum generation from PDF")

        def progress(status: ProgressStatus, message: str, **metadata) -> None:
            sink.on(create_progress_event(status, message, metadata or None))

        progress(ProgressStatus.STARTED, "Starting curriculum generation")

        # Step 1: Extract text
        progress(ProgressStatus.PARSING_PDF, "Parsing PDF document...")
        document_text = self.extractor(document_bytes)
        progress(ProgressStatus.PDF_PARSED, "PDF parsed successfully", contentLength=len(document_text))

        # Step 2: Resolve provider
        provider = self.registry.resolve(provider_name)
        progress(ProgressStatus.GENERATING_CURRICULUM, f"Generating curriculum using {provider.identify()}...")

        # Step 3: Generate, relaying fragments in arrival order
        def on_fragment(fragment: str, index: int) -> None:
            sink.on(create_chunk_event(fragment, index))
            if index % PROGRESS_EVERY_N_FRAGMENTS == 0:
                progress(
                    ProgressStatus.AI_PROCESSING,
                    f"AI generating curriculum... ({index} chunks received)",
                    chunksReceived=index,
                )

        curriculum = provider.generate_streaming(document_text, on_fragment)

        # Step 4: Finalize
        progress(ProgressStatus.PARSING_RESPONSE, "Finalizing curriculum structure...")
        processing_time = int((time.monotonic() - start_time) * 1000)
        logger.info(
            f"✓ Streaming curriculum {curriculum.id} generated by {provider.identify()} in {processing_time} ms"
        )
        progress(
            ProgressStatus.COMPLETED,
            "Curriculum generated successfully",
            processingTime=processing_time,
            modules=len(curriculum.modules),
        )

        return GenerationResult(curriculum=curriculum, provider_name=provider.identify())

    def provider_name(self) -> str:
        return self.registry.resolve().identify()

    def provider_available(self) -> bool:
        return self.registry.resolve().is_available()
