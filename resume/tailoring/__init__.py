# resume/tailoring/__init__.py
"""
Resume generation pipeline
"""

from resume.tailoring.orchestrator import GenerationOrchestrator, parse_tailoring_payload
from resume.tailoring.single_flight import SingleFlight

__all__ = [
    'GenerationOrchestrator',
    'SingleFlight',
    'parse_tailoring_payload',
]
