# webapp/api/__init__.py
