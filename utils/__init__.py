"""Parsing helpers for the Bot API schema extractor."""
