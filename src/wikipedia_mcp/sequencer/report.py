"""Plain-text rendering of a finished sequencer session."""

import json
from typing import Any, List

from .session import SequencerSession

MAX_IMAGES_SHOWN = 10
MAX_CONTENT_CHARS = 500


def render_report(session: SequencerSession) -> str:
    """Render everything a session collected.

    Args:
        session: The session to render, usually in a terminal state.

    Returns:
        A multi-line report.
    """
    lines: List[str] = [f"Wikipedia MCP example ({session.state.value})"]
    if session.server_info:
        lines.append(f"Server: {session.server_info.get('name')} {session.server_info.get('version')}")
    if session.failure:
        lines.append(f"Stopped early: {session.failure}")

    lines.append("")
    lines.append("Available tools")
    lines.extend(f"  - {tool['name']}: {tool['description']}" for tool in session.tools)

    _section(lines, session, "onThisDay", "On this day", _render_on_this_day)
    _section(lines, session, "findPage", "Find page", _render_search)
    _section(lines, session, "getPage", "Get page", _render_page)
    _section(lines, session, "getImagesForPage", "Images for page", _render_images)
    return "\n".join(lines)


def _section(lines: List[str], session: SequencerSession, key: str, heading: str, render: Any) -> None:
    lines.append("")
    lines.append(heading)
    if key in session.results:
        lines.extend(f"  {line}" for line in render(session.results[key]))
    elif key in session.errors:
        lines.append(f"  Error: {session.errors[key]}")
    else:
        lines.append("  (no result)")


def _render_on_this_day(data: Any) -> List[str]:
    if not isinstance(data, dict):
        return [json.dumps(data)]
    out = []
    for kind in ("selected", "events", "births", "deaths", "holidays"):
        entries = data.get(kind) or []
        out.append(f"{kind}: {len(entries)}")
    for event in (data.get("events") or [])[:3]:
        if isinstance(event, dict):
            out.append(f"  {event.get('year', '?')}: {event.get('text', '')}")
    return out


def _render_search(data: Any) -> List[str]:
    if not isinstance(data, dict):
        return [json.dumps(data)]
    out = [f"- {hit.get('title')}" for hit in data.get("results", []) if isinstance(hit, dict)]
    if data.get("suggestion"):
        out.append(f"Did you mean: {data['suggestion']}")
    return out or ["no matches"]


def _render_page(data: Any) -> List[str]:
    if not isinstance(data, dict):
        return [json.dumps(data)]
    summary = data.get("summary") or {}
    extract = summary.get("extract", "") if isinstance(summary, dict) else str(summary)
    content = str(data.get("content", ""))
    if len(content) > MAX_CONTENT_CHARS:
        content = content[:MAX_CONTENT_CHARS] + "..."
    return [f"{data.get('title')} <{data.get('url')}>", f"Summary: {extract}", f"Content: {content}"]


def _render_images(data: Any) -> List[str]:
    if not isinstance(data, list):
        return [json.dumps(data)]
    out = [f"{img.get('title')}: {img.get('url')}" for img in data[:MAX_IMAGES_SHOWN] if isinstance(img, dict)]
    out.append(f"Showing {min(len(data), MAX_IMAGES_SHOWN)} of {len(data)} images")
    return out
