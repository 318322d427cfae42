"""Language model runner adapters."""

from .runner import LLMRequest, LLMRunner, parse_json_object

__all__ = ["LLMRequest", "LLMRunner", "parse_json_object"]
