# webapp/__init__.py
"""
HTTP layer for the resume tailoring service
"""
