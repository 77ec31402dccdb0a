"""Knowledge base implementations."""

from batinh.infrastructure.knowledge.yaml_knowledge_base import (
    DEFAULT_DATA_PATH,
    YamlKnowledgeBase,
)

__all__ = ["DEFAULT_DATA_PATH", "YamlKnowledgeBase"]
