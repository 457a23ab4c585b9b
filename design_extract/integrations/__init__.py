"""External collaborators: Figma REST API and Claude CLI screenshot analysis."""
