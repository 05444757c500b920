"""Adapters bridging mdsmith with Markdown and HTML rendering libraries."""
