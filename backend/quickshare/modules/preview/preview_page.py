# Copyright (c) 2026 Harsh Dwivedi
# Licensed under the Harsh Non-Commercial Attribution License (HNCAL) v1.0
# Commercial use requires written permission. See LICENSE for details.

"""
QuickShare: Preview Page Renderer
The HTML served to link unfurlers. Crawlers read the Open Graph tags;
browsers follow the zero-delay meta refresh to the canonical post page.
"""

from __future__ import annotations

from html import escape

_PAGE_TEMPLATE = """<!DOCTYPE html>
<html>
  <head>
    <meta charset="utf-8" />
    <meta property="og:image" content="{image_url}" />
    <meta property="og:url" content="{canonical_url}" />
    <meta http-equiv="refresh" content="0; url={canonical_url}" />
    <link rel="canonical" href="{canonical_url}" />
  </head>
  <body>Redirecting...</body>
</html>
"""


def render_preview_page(artifact_url: str, canonical_url: str) -> str:
    """Render the redirect document. Both URLs are attribute-escaped."""
    return _PAGE_TEMPLATE.format(
        image_url=escape(artifact_url, quote=True),
        canonical_url=escape(canonical_url, quote=True),
    )
