from pathlib import Path
from typing import Protocol

from recruiting_agent.core.errors import TemplateNotFound
from recruiting_agent.prompts.loader import PROMPTS_DIR, load_prompt


class PromptStore(Protocol):
    def get_prompt(self, name: str) -> str:
        ...


class FilesystemPromptStore:
    """
    PromptStore backed by a directory of template documents.

    Expected layout:
        <base_dir>/
          generate_cv.yaml
          <other>.yaml
    """

    def __init__(self, *, base_dir: Path = PROMPTS_DIR) -> None:
        self._base_dir = base_dir

    def get_prompt(self, name: str) -> str:
        return load_prompt(name, self._base_dir)


class InMemoryPromptStore:
    def __init__(self, prompts: dict[str, str]):
        self._prompts = prompts

    def get_prompt(self, name: str) -> str:
        try:
            return self._prompts[name]
        except KeyError:
            raise TemplateNotFound(name, list(self._prompts)) from None
