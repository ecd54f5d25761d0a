"""Markdown rendering for Notion pages, transport-agnostic.

Contains:
- renderer_iface: the BlockSource / PageLinker Protocols
- rich_text: styled text runs to inline Markdown
- renderer: block tree to Markdown
- references: page reference resolution with a per-run cache
- exporter: whole pages (front matter + body) to vault files
"""
