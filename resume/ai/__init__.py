# resume/ai/__init__.py
"""
LLM rewrite service clients
"""

from resume.ai.base import EmptyResponseError, RewriteService, UpstreamCallError
from resume.ai.ollama_client import OllamaRewriteClient
from resume.ai.openai_client import OpenAIRewriteClient
from resume.ai.retry import RetryPolicy

__all__ = [
    'EmptyResponseError',
    'OllamaRewriteClient',
    'OpenAIRewriteClient',
    'RetryPolicy',
    'RewriteService',
    'UpstreamCallError',
]
