"""Typed models, builders and wire codecs for Discord interactions."""
