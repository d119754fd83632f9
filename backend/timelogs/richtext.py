"""
Извлечение текста из комментариев worklog.

Jira Server отдаёт комментарий строкой, Jira Cloud деревом ADF
(doc -> paragraph -> text/hardBreak/...). Для отчёта нужен плоский текст.
"""
from __future__ import annotations

from typing import Any

NO_DESCRIPTION = "No description"

HARD_BREAK = "hardBreak"


def _walk(node: Any, out: list[str]) -> None:
    if isinstance(node, list):
        for child in node:
            _walk(child, out)
        return
    if not isinstance(node, dict):
        return
    text = node.get("text")
    if isinstance(text, str):
        out.append(text)
    if node.get("type") == HARD_BREAK:
        out.append(" ")
    content = node.get("content")
    if content:
        _walk(content, out)


def extract_comment_text(comment: Any) -> str:
    """
    Плоский текст комментария: текстовые листья склеиваются в порядке обхода
    в глубину, на каждом hardBreak вставляется пробел. Пустой результат
    заменяется на NO_DESCRIPTION.
    """
    if not comment:
        return NO_DESCRIPTION
    if isinstance(comment, str):
        return comment
    if isinstance(comment, dict) and isinstance(comment.get("content"), list):
        parts: list[str] = []
        _walk(comment["content"], parts)
        return "".join(parts) or NO_DESCRIPTION
    return NO_DESCRIPTION


def clean_text(text: str | None) -> str:
    """Экранирует кавычки и схлопывает переводы строк в пробел."""
    value = text or ""
    value = value.replace('"', '\\"')
    return value.replace("\r\n", " ").replace("\n", " ").replace("\r", " ")


def clean_summary(text: str | None) -> str:
    return clean_text(text or NO_DESCRIPTION)
