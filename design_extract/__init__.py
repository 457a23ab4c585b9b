"""Figma design token & component extractor.

Subpackages:
- processors: Token / component normalization, tree walking, AI-response JSON recovery
- integrations: External collaborators (Figma REST API, Claude CLI vision analysis)
"""
