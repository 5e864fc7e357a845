"""Recruiting assistant agent: conditional prompt templates and a hosted agent client."""

__version__ = '1.0.0'
