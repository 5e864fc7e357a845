from .prompt_builder import CVPromptBuilder, PromptBuilder
from .renderer import Conditional, Literal, Placeholder, PromptRenderer, Template
