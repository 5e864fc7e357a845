"""This module handles loading prompt templates from packaged documents."""
from .loader import PromptDocument, extract_template_body, load_document, load_prompt
from .store import FilesystemPromptStore, InMemoryPromptStore, PromptStore
