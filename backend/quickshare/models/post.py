# Copyright (c) 2026 Harsh Dwivedi
# Licensed under the Harsh Non-Commercial Attribution License (HNCAL) v1.0
# Commercial use requires written permission. See LICENSE for details.

"""
QuickShare: Post Records
Read-only view of a stored post. Only the image reference is used to
build a preview; title and movie are carried for metadata consumers.
"""

from __future__ import annotations

import re

from pydantic import BaseModel, Field

# Posts are keyed by 24-char hex ObjectIds
POST_ID_PATTERN = re.compile(r"^[0-9a-fA-F]{24}$")


def is_valid_post_id(post_id: str) -> bool:
    return bool(POST_ID_PATTERN.match(post_id))


class PostImage(BaseModel):
    """Paths of the post's image, relative to the configured image root."""
    url: str = Field(..., min_length=1, description="Full-resolution image path")
    thumb: str = Field("", description="Preview-sized image path")


class Post(BaseModel):
    post_id: str
    image: PostImage
    title: str = ""
    movie: str = ""

    def image_ref(self, variant: str = "url") -> str:
        """Return the image path for 'url' or 'thumb', falling back to url."""
        if variant == "thumb" and self.image.thumb:
            return self.image.thumb
        return self.image.url
