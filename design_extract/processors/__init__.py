"""Deterministic normalization of Figma payloads into tokens and component specs."""
