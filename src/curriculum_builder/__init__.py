"""
curriculum builder

Generate a Curriculum -> Modules -> Topics -> Lessons hierarchy from an
uploaded PDF, using a rule based parser or an Ollama hosted LLM.
"""

from .models import Curriculum, Module, Topic, Lesson, GenerationResult
from .processing_service import CurriculumService

__version__ = "1.0.0"

__all__ = ["Curriculum", "Module", "Topic", "Lesson", "GenerationResult", "CurriculumService"]
