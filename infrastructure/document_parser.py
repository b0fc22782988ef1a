import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Tuple

from core.status import TaskStatus
from core.task import Task

SNIPPET_LIMIT = 140
MAX_HEADING_LEVEL = 6


class DocumentParseError(Exception):
    pass


@dataclass
class DocumentNode:
    title: str
    description: str = ""
    children: List["DocumentNode"] = field(default_factory=list)


@dataclass
class DocumentSummary:
    title: str
    description: str
    subtask_count: int


def snippet(text: str, limit: int = SNIPPET_LIMIT) -> str:
    text = text.strip()
    if limit <= 0 or len(text) <= limit:
        return text
    return text[: limit - 1] + "…"


def _leading_width(line: str) -> int:
    width = 0
    for ch in line:
        if ch == " ":
            width += 1
        elif ch == "\t":
            width += 4
        else:
            break
    return width


class DocumentParser:
    """Turns a markdown-like requirements document into a task tree.

    Headings nest by level, bullets nest by indentation (two spaces per level)
    under the nearest heading, and plain text becomes the description of the
    node above it.
    """

    BULLET_PATTERN = re.compile(r"^(?:\d+[.)]|[-+*])\s+")

    @staticmethod
    def _heading(line: str) -> Tuple[int, str]:
        hashes = len(line) - len(line.lstrip("#"))
        if hashes == 0:
            return 0, ""
        title = line[hashes:].strip()
        if not title:
            return 0, ""
        return min(hashes, MAX_HEADING_LEVEL), title

    @classmethod
    def _bullet(cls, raw: str) -> Tuple[int, str]:
        stripped = raw.lstrip(" \t")
        match = cls.BULLET_PATTERN.match(stripped)
        if not match:
            return -1, ""
        text = stripped[match.end():].strip()
        if not text:
            return -1, ""
        return _leading_width(raw), text

    @classmethod
    def parse(cls, content: str) -> List[DocumentNode]:
        roots: List[DocumentNode] = []
        headings: List[DocumentNode] = []
        bullets: List[DocumentNode] = []
        last: Optional[DocumentNode] = None

        for raw in content.splitlines():
            raw = raw.rstrip("\r")
            trimmed = raw.strip()
            if not trimmed:
                if last and last.description and not last.description.endswith("\n\n"):
                    last.description += "\n\n"
                continue

            level, title = cls._heading(trimmed)
            if level:
                node = DocumentNode(title=title)
                del headings[level - 1:]
                (headings[-1].children if headings else roots).append(node)
                headings.append(node)
                bullets.clear()
                last = node
                continue

            indent, text = cls._bullet(raw)
            if indent >= 0:
                node = DocumentNode(title=text)
                depth = indent // 2
                if depth == 0:
                    bullets.clear()
                elif depth < len(bullets):
                    del bullets[depth:]
                if 0 < depth <= len(bullets):
                    parent = bullets[depth - 1]
                else:
                    parent = headings[-1] if headings else None
                (parent.children if parent else roots).append(node)
                if depth < len(bullets):
                    bullets[depth] = node
                    del bullets[depth + 1:]
                else:
                    bullets.append(node)
                last = node
                continue

            if last is None:
                node = DocumentNode(title=trimmed)
                roots.append(node)
                headings.append(node)
                bullets.clear()
                last = node
                continue

            if last.description and not last.description.endswith("\n"):
                last.description += "\n"
            last.description += trimmed

        if not roots:
            raise DocumentParseError("no tasks detected in document")
        for root in roots:
            _trim_descriptions(root)
        return roots

    @classmethod
    def parse_file(cls, path: Path) -> List[DocumentNode]:
        return cls.parse(Path(path).read_text(encoding="utf-8"))


def _trim_descriptions(node: DocumentNode) -> None:
    node.description = node.description.strip()
    for child in node.children:
        _trim_descriptions(child)


def summarize(nodes: List[DocumentNode]) -> List[DocumentSummary]:
    return [DocumentSummary(n.title, snippet(n.description), len(n.children)) for n in nodes]


def build_tasks(nodes: List[DocumentNode], start_id: int) -> List[Task]:
    """Root nodes get consecutive ids from start_id; children are numbered under them."""
    return [_node_to_task(node, str(start_id + offset)) for offset, node in enumerate(nodes)]


def _node_to_task(node: DocumentNode, task_id: str) -> Task:
    task = Task(id=task_id, title=node.title, description=node.description, status=TaskStatus.PENDING, priority="medium")
    task.subtasks = [_node_to_task(child, f"{task_id}.{i + 1}") for i, child in enumerate(node.children)]
    return task


__all__ = [
    "DocumentParseError",
    "DocumentNode",
    "DocumentSummary",
    "DocumentParser",
    "snippet",
    "summarize",
    "build_tasks",
]
