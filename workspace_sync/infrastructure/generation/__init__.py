from .base import ContentGenerator
from .llm_generator import LLMContentGenerator, parse_json

__all__ = ["ContentGenerator", "LLMContentGenerator", "parse_json"]
