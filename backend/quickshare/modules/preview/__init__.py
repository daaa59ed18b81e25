# Copyright (c) 2026 Harsh Dwivedi
# Licensed under the Harsh Non-Commercial Attribution License (HNCAL) v1.0
# Commercial use requires written permission. See LICENSE for details.

"""
QuickShare: Preview Module
Public API for the redirect page served to link unfurlers.
"""

from quickshare.modules.preview.preview_page import render_preview_page

__all__ = ["render_preview_page"]
