"""
Pytest configuration and fixtures for curriculum builder tests.
"""

from typing import Iterator, List

import fitz
import pytest

from curriculum_builder.config import Settings
from curriculum_builder.providers import ProviderRegistry


def make_pdf(lines: List[str]) -> bytes:
    """Build a one page PDF containing the given lines of text."""
    doc = fitz.open()
    page = doc.new_page()
    y = 72
    for line in lines:
        page.insert_text((72, y), line, fontsize=11)
        y += 16
    data = doc.tobytes()
    doc.close()
    return data


@pytest.fixture(scope="session")
def syllabus_lines() -> List[str]:
    return [
        "Introduction to Programming",
        "Module 1 - Basics",
        "Topic 1.1 - Variables",
        "Lesson 1.1.1 - What are Variables",
        "Module 2 - Control Flow",
    ]


@pytest.fixture(scope="session")
def syllabus_pdf(syllabus_lines) -> bytes:
    return make_pdf(syllabus_lines)


@pytest.fixture(scope="session")
def blank_pdf() -> bytes:
    return make_pdf([])


@pytest.fixture
def settings() -> Settings:
    return Settings(_env_file=None, AI_PROVIDER="mock")


@pytest.fixture
def registry(settings) -> ProviderRegistry:
    return ProviderRegistry(settings)


class FakeLLMService:
    """Stands in for OllamaLLMService with canned output."""

    model = "fake-model"

    def __init__(self, fragments: List[str], error: Exception = None):
        self.fragments = fragments
        self.error = error
        self.prompts: List[str] = []

    def generate_text(self, prompt: str) -> str:
        self.prompts.append(prompt)
        if self.error:
            raise self.error
        return "".join(self.fragments)

    def stream_text(self, prompt: str) -> Iterator[str]:
        self.prompts.append(prompt)
        for fragment in self.fragments:
            yield fragment
        if self.error:
            raise self.error


@pytest.fixture
def curriculum_json() -> str:
    return (
        '{"title": "Data Science", "description": "Intro course", "modules": ['
        '{"id": "backend-id", "title": "Statistics", "description": "Numbers", "topics": ['
        '{"title": "Distributions", "description": "Shapes", "lessons": ['
        '{"title": "Normal", "description": "Bell curve"},'
        '{"title": "Poisson", "description": "Counts"}]}]},'
        '{"title": "Python", "topics": []}]}'
    )


def collect_ids(curriculum) -> List[str]:
    """Every id in the tree, curriculum first."""
    ids = [curriculum.id]
    for module in curriculum.modules:
        ids.append(module.id)
        for topic in module.topics:
            ids.append(topic.id)
            ids.extend(lesson.id for lesson in topic.lessons)
    return ids


def without_ids(curriculum) -> dict:
    """Curriculum as a dict with ids removed, for structural comparison."""
    data = curriculum.model_dump()

    def strip(node):
        node.pop("id", None)
        for key in ("modules", "topics", "lessons"):
            for child in node.get(key, []):
                strip(child)
        return node

    return strip(data)
