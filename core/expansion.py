"""Rule-based subtask drafting used by the expand workflow."""

import re
from dataclasses import dataclass, field
from typing import List, Tuple

from .status import TaskStatus
from .task import Task

MAX_TITLE_WORDS = 10

_BULLET_RE = re.compile(r"^([\-*+]\s+|\d+[.)]\s+)")
_SENTENCE_SPLIT_RE = re.compile(r"[.!?]")


@dataclass
class ExpandOptions:
    depth: int = 1
    num_subtasks: int = 0  # 0 means "as many as the text yields"
    force: bool = False


@dataclass
class SubtaskDraft:
    title: str
    description: str = ""
    children: List["SubtaskDraft"] = field(default_factory=list)


@dataclass
class ExpandProgress:
    stage: str
    fraction: float
    task_id: str = ""


def _non_empty_lines(text: str) -> List[str]:
    return [line.strip() for line in text.split("\n") if line.strip()]


def split_sentences(text: str) -> List[str]:
    return [chunk.strip() for chunk in _SENTENCE_SPLIT_RE.split(text) if chunk.strip()]


def _limit(items: List[str], limit: int) -> List[str]:
    if limit <= 0 or len(items) <= limit:
        return items
    return items[:limit]


def derive_segments(task: Task, options: ExpandOptions) -> List[str]:
    source = task.description.strip() or task.details.strip() or task.title
    bullets = [_BULLET_RE.sub("", line) for line in _non_empty_lines(source) if _BULLET_RE.match(line)]
    if len(bullets) >= 2:
        return _limit(bullets, options.num_subtasks)
    return _limit(split_sentences(source), options.num_subtasks)


def split_child_segments(segment: str) -> List[str]:
    """Split a segment for the next draft level: lines, then ';', then ',', then sentences."""
    if "\n" in segment:
        lines = _non_empty_lines(segment)
        if len(lines) > 1:
            return lines
    if ";" in segment:
        parts = [part.strip() for part in segment.split(";") if part.strip()]
        if parts:
            return parts
    if "," in segment:
        parts = [part.strip() for part in segment.split(",") if part.strip()]
        if len(parts) > 1:
            return parts
    return split_sentences(segment)


def title_case(text: str) -> str:
    words = []
    for word in text.split():
        words.append(word.upper() if len(word) == 1 else word[:1].upper() + word[1:].lower())
    return " ".join(words)


def summarize_segment(segment: str, idx: int) -> str:
    trimmed = segment.strip()
    if trimmed.endswith("."):
        trimmed = trimmed[:-1]
    words = trimmed.split()
    if not words:
        return f"Task Segment {idx + 1}"
    words = words[:MAX_TITLE_WORDS]
    title = " ".join(words)
    if len(words) == MAX_TITLE_WORDS:
        title += "…"
    return title_case(title)


def _build_draft(segment: str, remaining_depth: int, options: ExpandOptions, idx: int) -> SubtaskDraft:
    segment = segment.strip()
    draft = SubtaskDraft(title=summarize_segment(segment, idx), description=segment)
    if remaining_depth <= 0:
        return draft
    children = _limit(split_child_segments(segment), options.num_subtasks)
    draft.children = [_build_draft(child, remaining_depth - 1, options, i) for i, child in enumerate(children)]
    return draft


def expand_task_drafts(task: Task, options: ExpandOptions) -> List[SubtaskDraft]:
    depth = options.depth if options.depth > 0 else 1
    segments = derive_segments(task, options)
    if not segments:
        title = task.title.strip() or "the selected task"
        segments = [f"Break down {title} into actionable steps"]
    return [_build_draft(segment, depth - 1, options, idx) for idx, segment in enumerate(segments)]


def _draft_to_task(draft: SubtaskDraft, task_id: str) -> Task:
    task = Task(id=task_id, title=draft.title, description=draft.description, status=TaskStatus.PENDING)
    task.subtasks = [_draft_to_task(child, f"{task_id}.{i + 1}") for i, child in enumerate(draft.children)]
    return task


def apply_subtask_drafts(parent: Task, drafts: List[SubtaskDraft]) -> List[str]:
    """Append drafts under parent; numbering continues after existing subtasks."""
    offset = len(parent.subtasks)
    new_ids: List[str] = []
    for i, draft in enumerate(drafts):
        sub_id = f"{parent.id}.{offset + i + 1}"
        parent.subtasks.append(_draft_to_task(draft, sub_id))
        new_ids.append(sub_id)
    return new_ids


def flatten_drafts(drafts: List[SubtaskDraft]) -> List[Tuple[SubtaskDraft, int, Tuple[int, ...]]]:
    """Pre-order (draft, level, path) triples."""
    flat: List[Tuple[SubtaskDraft, int, Tuple[int, ...]]] = []

    def walk(items: List[SubtaskDraft], level: int, path: Tuple[int, ...]) -> None:
        for idx, item in enumerate(items):
            current = path + (idx,)
            flat.append((item, level, current))
            walk(item.children, level + 1, current)

    walk(drafts, 0, ())
    return flat


def format_drafts_as_prompt(drafts: List[SubtaskDraft]) -> str:
    lines = []
    for draft, level, _ in flatten_drafts(drafts):
        line = f"{'  ' * level}- {draft.title}"
        if draft.description and draft.description.lower() != draft.title.lower():
            line = f"{line} ({draft.description})"
        lines.append(line)
    return "\n".join(lines)


def count_drafts(drafts: List[SubtaskDraft]) -> int:
    return len(flatten_drafts(drafts))


__all__ = [
    "ExpandOptions",
    "SubtaskDraft",
    "ExpandProgress",
    "split_sentences",
    "derive_segments",
    "split_child_segments",
    "title_case",
    "summarize_segment",
    "expand_task_drafts",
    "apply_subtask_drafts",
    "flatten_drafts",
    "format_drafts_as_prompt",
    "count_drafts",
]
