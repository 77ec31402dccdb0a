"""Jinja2 prompt builder."""

from batinh.config import PersonaConfig
from batinh.domain.entities import (
    AnalysisResult,
    Polarity,
    PromptContext,
    TemplateKind,
)
from batinh.domain.services.protocols import KnowledgeBase
from batinh.infrastructure.llm.templates import create_jinja_env

TOP_STAR_LIMIT = 3


class PromptBuilder:
    """Renders prompt templates.

    Rendering is pure: the same template kind and context always produce
    the same string.
    """

    def __init__(self, persona: PersonaConfig, knowledge_base: KnowledgeBase) -> None:
        """Initialize the builder.

        Args:
            persona: Persona used by the system instruction.
            knowledge_base: Source of the star table for general info.
        """
        self._persona = persona
        self._knowledge_base = knowledge_base
        self._jinja_env = create_jinja_env()
        self._templates = {
            kind: self._jinja_env.get_template(f"{kind.value}.j2")
            for kind in TemplateKind
        }
        self._system_template = self._jinja_env.get_template("system.j2")

    def system_prompt(self) -> str:
        """Render the system instruction."""
        return self._system_template.render(
            persona_name=self._persona.name,
            persona_prompt=self._persona.system_prompt,
        ).strip()

    def build(self, template_kind: TemplateKind, context: PromptContext) -> str:
        """Render a prompt.

        Args:
            template_kind: Template to render.
            context: Analysis, analyses and question.

        Returns:
            Rendered prompt.

        Raises:
            ValueError: The context lacks the analysis the template needs.
        """
        variables: dict = {"question": context.question}

        if template_kind in (
            TemplateKind.SINGLE_ANALYSIS,
            TemplateKind.TARGETED_QUESTION,
            TemplateKind.FOLLOW_UP,
        ):
            if context.analysis is None:
                raise ValueError(f"{template_kind.value} requires an analysis")
            variables.update(self._analysis_variables(context.analysis))
        elif template_kind is TemplateKind.COMPARISON:
            if len(context.analyses) < 2:
                raise ValueError("comparison requires at least two analyses")
            variables["analyses"] = context.analyses
        elif template_kind is TemplateKind.GENERAL_INFO:
            stars = self._knowledge_base.stars()
            variables["auspicious_stars"] = [
                s for s in stars if s.star.polarity is Polarity.AUSPICIOUS
            ]
            variables["inauspicious_stars"] = [
                s for s in stars if s.star.polarity is Polarity.INAUSPICIOUS
            ]

        return self._templates[template_kind].render(**variables).strip()

    @staticmethod
    def _analysis_variables(analysis: AnalysisResult) -> dict:
        repeated = [
            (star, count) for star, count in analysis.star_counts().items() if count > 1
        ]
        return {
            "analysis": analysis,
            "top_stars": analysis.top_stars(TOP_STAR_LIMIT),
            "repeated_stars": repeated,
        }
