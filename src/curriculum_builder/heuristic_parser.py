# rule based inference of a module/topic/lesson tree from unstructured text
import re
import logging
from typing import List, Optional

from .hierarchy import (
    RawNode, DEFAULT_CURRICULUM_TITLE, DEFAULT_CURRICULUM_DESCRIPTION, ensure_lessons, ensure_topics,
)

logger = logging.getLogger(__name__)

MODULE = "module"
TOPIC = "topic"
LESSON = "lesson"
PROSE = "prose"

MAX_TITLE_LENGTH = 100


class HeuristicDocumentParser:
    """Best-effort structural inference over extracted document text.

    Lines are classified by pattern into module, topic and lesson headings;
    everything else is prose and only matters for the curriculum title. The
    scan keeps a module and a topic cursor and fills in a default topic or
    lesson wherever a heading closes with no children, so the result always
    satisfies the non-empty invariants of the hierarchy.
    """

    # initialize parser with the heading patterns for each level
    def __init__(self):
        self.module_patterns = [
            re.compile(r'^(?:module|chapter|unit|part)(?![a-z])\s*\d*', re.IGNORECASE),
            re.compile(r'^\d+\.\s+[A-Z]'),  # 1. Title
        ]
        self.lesson_patterns = [
            re.compile(r'^\d+\.\d+\.\d+'),  # 1.1.1 Title
            re.compile(r'^(?:activity|exercise)(?![a-z])\s*\d*', re.IGNORECASE),
        ]
        self.topic_patterns = [
            re.compile(r'^(?:topic|section)(?![a-z])\s*\d*', re.IGNORECASE),
            re.compile(r'^\d+\.\d+\s'),  # 1.1 Title
        ]
        # "lesson" is a lesson inside an open topic, otherwise it opens a topic
        self.lesson_keyword = re.compile(r'^lesson(?![a-z])\s*\d*', re.IGNORECASE)

        self.keyword_prefix = re.compile(
            r'^(?:module|chapter|unit|part|topic|section|lesson|activity|exercise)(?![a-z])\s*',
            re.IGNORECASE,
        )
        self.number_prefix = re.compile(r'^\d+(?:\.\d+)*\.?')
        self.separator_prefix = re.compile(r'^[\s\-–—:.)]+')

    # parse text into a raw tree rooted at the curriculum
    def parse(self, text: str) -> RawNode:
        """Scan the non-blank lines of text and build a raw curriculum tree"""
        lines = [line.strip() for line in text.split('\n') if line.strip()]

        modules: List[RawNode] = []
        current_module: Optional[RawNode] = None
        current_topic: Optional[RawNode] = None

        for line in lines:
            kind = self.classify(line, topic_open=current_topic is not None)

            if kind == MODULE:
                if current_module is not None:
                    if current_topic is not None:
                        current_module.children.append(ensure_lessons(current_topic))
                    modules.append(ensure_topics(current_module))
                current_module = self._create_module(line, len(modules) + 1)
                current_topic = None

            elif kind == TOPIC and current_module is not None:
                if current_topic is not None:
                    current_module.children.append(ensure_lessons(current_topic))
                current_topic = self._create_topic(line, len(current_module.children) + 1)

            elif kind == LESSON and current_topic is not None:
                current_topic.children.append(self._create_lesson(line, len(current_topic.children) + 1))

        # flush whatever is still open
        if current_module is not None:
            if current_topic is not None:
                current_module.children.append(ensure_lessons(current_topic))
            modules.append(ensure_topics(current_module))

        logger.debug(f"Heuristic parse found {len(modules)} modules in {len(lines)} lines")

        return RawNode(
            title=self.extract_title(lines),
            description=DEFAULT_CURRICULUM_DESCRIPTION,
            children=modules,
        )

    # label a line as a module, topic or lesson heading, or prose
    def classify(self, line: str, topic_open: bool = False) -> str:
        if any(pattern.match(line) for pattern in self.module_patterns):
            return MODULE
        if any(pattern.match(line) for pattern in self.lesson_patterns):
            return LESSON
        if self.lesson_keyword.match(line):
            return LESSON if topic_open else TOPIC
        if any(pattern.match(line) for pattern in self.topic_patterns):
            return TOPIC
        return PROSE

    # strip keyword, numbering and separators to get a readable title
    def clean_title(self, line: str) -> str:
        title = self.keyword_prefix.sub('', line.strip())
        title = self.number_prefix.sub('', title)
        title = self.separator_prefix.sub('', title)
        return title.strip()

    # first non-blank line is usually the document title
    def extract_title(self, lines: List[str]) -> str:
        if not lines:
            return DEFAULT_CURRICULUM_TITLE
        return lines[0][:MAX_TITLE_LENGTH]

    def _create_module(self, line: str, index: int) -> RawNode:
        return RawNode(
            title=self.clean_title(line) or f"Module {index}",
            description=f"Content for module {index}",
        )

    def _create_topic(self, line: str, index: int) -> RawNode:
        return RawNode(
            title=self.clean_title(line) or f"Topic {index}",
            description=f"Content for topic {index}",
        )

    def _create_lesson(self, line: str, index: int) -> RawNode:
        return RawNode(
            title=self.clean_title(line) or f"Lesson {index}",
            description=f"Learning objectives for lesson {index}",
        )
