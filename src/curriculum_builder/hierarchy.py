# turns raw parsed trees into normalized curricula with fresh ids
import uuid
from dataclasses import dataclass, field
from typing import List

from .models import Curriculum, Module, Topic, Lesson

DEFAULT_CURRICULUM_TITLE = "Uploaded Curriculum"
DEFAULT_CURRICULUM_DESCRIPTION = "Curriculum generated from uploaded PDF document"


# pre-normalization node: no id yet, children may be empty
@dataclass
class RawNode:
    title: str
    description: str = ""
    children: List["RawNode"] = field(default_factory=list)


def new_id() -> str:
    return str(uuid.uuid4())


# default lesson used when a topic has none
def default_lesson(topic_title: str) -> RawNode:
    return RawNode(
        title=f"Lesson 1 - Introduction to {topic_title}",
        description="Foundational concepts and learning objectives",
    )


# default topic used when a module has none
def default_topic(module_title: str) -> RawNode:
    return RawNode(
        title=f"Topic 1 - Overview of {module_title}",
        description="Overview and key concepts",
        children=[default_lesson("Overview")],
    )


# default module used when the source yields nothing
def default_module() -> RawNode:
    return RawNode(
        title="Module 1 - Introduction",
        description="Introduction to the curriculum content",
        children=[default_topic("Introduction")],
    )


def ensure_lessons(topic: RawNode) -> RawNode:
    if not topic.children:
        topic.children.append(default_lesson(topic.title))
    return topic


def ensure_topics(module: RawNode) -> RawNode:
    if not module.children:
        module.children.append(default_topic(module.title))
    for topic in module.children:
        ensure_lessons(topic)
    return module


# build the final curriculum, filling missing children and assigning ids
def build_curriculum(root: RawNode) -> Curriculum:
    """Normalize a raw Module/Topic/Lesson tree into a Curriculum"""
    raw_modules = root.children or [default_module()]

    modules = []
    for raw_module in raw_modules:
        ensure_topics(raw_module)
        topics = []
        for raw_topic in raw_module.children:
            lessons = [
                Lesson(id=new_id(), title=raw_lesson.title, description=raw_lesson.description)
                for raw_lesson in raw_topic.children
            ]
            topics.append(
                Topic(id=new_id(), title=raw_topic.title, description=raw_topic.description, lessons=lessons)
            )
        modules.append(
            Module(id=new_id(), title=raw_module.title, description=raw_module.description, topics=topics)
        )

    return Curriculum(
        id=new_id(),
        title=root.title or DEFAULT_CURRICULUM_TITLE,
        description=root.description,
        modules=modules,
    )
