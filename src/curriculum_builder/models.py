# pydantic models for the curriculum hierarchy and api payloads
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel
from typing import List


# base model for everything that goes over the wire with camelCase keys
class WireModel(BaseModel):
    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    def to_wire(self) -> dict:
        return self.model_dump(mode="json", by_alias=True)


# leaf node of the hierarchy
class Lesson(WireModel):
    id: str
    title: str
    description: str


# a topic groups lessons, never empty after normalization
class Topic(WireModel):
    id: str
    title: str
    description: str
    lessons: List[Lesson]


# a module groups topics, never empty after normalization
class Module(WireModel):
    id: str
    title: str
    description: str
    topics: List[Topic]


# the complete four-level tree returned to the caller
class Curriculum(WireModel):
    id: str
    title: str
    description: str
    modules: List[Module]

    def count_topics(self) -> int:
        return sum(len(module.topics) for module in self.modules)

    def count_lessons(self) -> int:
        return sum(len(topic.lessons) for module in self.modules for topic in module.topics)


# response model for a finished generation
class GenerationResult(WireModel):
    curriculum: Curriculum
    provider_name: str
