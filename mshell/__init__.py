"""A small command shell library: tokenizing, expansion, pipelines, redirections and built-ins."""

__version__ = "0.1.0"