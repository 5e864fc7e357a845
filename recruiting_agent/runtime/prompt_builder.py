"""Prompt builders: turn caller values into a context and render a parsed template."""

from __future__ import annotations

from recruiting_agent.prompts.store import FilesystemPromptStore, PromptStore
from recruiting_agent.runtime.renderer import Template

CV_PROMPT_NAME = 'generate_cv'


class PromptBuilder:
    """Render one template from a required primary value and an optional secondary value.

    The template is parsed once here and rendered on every `build` call.
    """

    def __init__(self, template: str | Template, *, primary_name: str, secondary_name: str) -> None:
        self._template = template if isinstance(template, Template) else Template.parse(template)
        self._primary_name = primary_name
        self._secondary_name = secondary_name

    @property
    def template(self) -> Template:
        return self._template

    def build(self, primary_value: str, secondary_value: str | None = None) -> str:
        """Render the template.

        Args:
            primary_value: Always placed in the context, even when empty.
            secondary_value: Placed in the context only when given.

        Returns:
            The rendered prompt, trimmed.
        """
        context = {self._primary_name: primary_value}
        if secondary_value is not None:
            context[self._secondary_name] = secondary_value
        return self._template.render(context).strip()


class CVPromptBuilder(PromptBuilder):
    """Builds CV generation prompts from a job profile and an optional job offer."""

    def __init__(self, template: str | Template) -> None:
        super().__init__(template, primary_name='jobProfile', secondary_name='jobOffer')

    @classmethod
    def from_store(cls, store: PromptStore | None = None, name: str = CV_PROMPT_NAME) -> 'CVPromptBuilder':
        store = store or FilesystemPromptStore()
        return cls(store.get_prompt(name))
