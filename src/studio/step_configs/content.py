"""
Content step: rich text, video, PDF or external link.

Stored shape:
    {"content_type": "text" | "video" | "pdf" | "link",
     "content_data": {"text": ..., "video_url": ..., "uploaded_video_url": ..., ...}}
"""

from __future__ import annotations

import re
from typing import Any, Dict, Literal

from pydantic import BaseModel, ConfigDict, Field

from studio.step_configs.base import StepConfigSpec, StepPayload, shallow_merge

ContentType = Literal["text", "video", "pdf", "link"]

# Upload kinds that have both an uploaded file and an external URL variant.
UPLOAD_KINDS = ("video", "pdf")

_YOUTUBE_RE = re.compile(r"^.*(youtu.be/|v/|u/\w/|embed/|watch\?v=|&v=)([^#&?]*).*")
_VIMEO_RE = re.compile(r"vimeo\.com/(\d+)")


class ContentData(BaseModel):
    model_config = ConfigDict(extra="allow")

    text: str = ""
    video_url: str = ""
    uploaded_video_url: str = ""
    pdf_url: str = ""
    uploaded_pdf_url: str = ""
    link_url: str = ""
    link_title: str = ""
    link_description: str = ""


class ContentPayload(StepPayload):
    content_type: ContentType = "text"
    content_data: ContentData = Field(default_factory=ContentData)


def merge_content(existing: Dict[str, Any], updates: Dict[str, Any]) -> Dict[str, Any]:
    """Shallow merge at the top level and one level down inside `content_data`."""
    merged = shallow_merge(existing, updates)
    if "content_data" in updates:
        merged["content_data"] = shallow_merge(existing.get("content_data"), updates["content_data"] or {})
    return merged


def attach_upload(kind: str, url: str) -> Dict[str, Any]:
    """Updates recording an uploaded file; the external URL of the same kind is cleared."""
    if kind not in UPLOAD_KINDS:
        raise ValueError(f"Unknown upload kind: {kind}")
    return {"content_data": {f"uploaded_{kind}_url": url, f"{kind}_url": ""}}


def detach_upload(kind: str) -> Dict[str, Any]:
    if kind not in UPLOAD_KINDS:
        raise ValueError(f"Unknown upload kind: {kind}")
    return {"content_data": {f"uploaded_{kind}_url": ""}}


def embed_url(url: str) -> str:
    """Embeddable player URL for YouTube/Vimeo links, or "" when the host is not recognised."""
    if not url:
        return ""
    if "youtube.com" in url or "youtu.be" in url:
        match = _YOUTUBE_RE.match(url)
        video_id = match.group(2) if match else None
        return f"https://www.youtube.com/embed/{video_id}" if video_id and len(video_id) == 11 else ""
    if "vimeo.com" in url:
        match = _VIMEO_RE.search(url)
        return f"https://player.vimeo.com/video/{match.group(1)}" if match else ""
    return ""


SPEC = StepConfigSpec(
    tag="content",
    label="Content",
    description="Text, video, PDF or link",
    payload_model=ContentPayload,
    merge_fn=merge_content,
)
