# resume/ai/base.py
from typing import Any, Dict, Optional, Protocol


class UpstreamCallError(Exception):
    """A call to the rewrite service failed in transit"""


class EmptyResponseError(UpstreamCallError):
    """The rewrite service answered without any content"""


class RewriteService(Protocol):
    """Anything that can produce a schema-constrained rewrite"""

    async def generate_structured(
        self,
        system_prompt: str,
        prompt: str,
        schema: Dict[str, Any]
    ) -> Optional[str]:
        ...
