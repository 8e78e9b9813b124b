# backend/article_sync/notion/markdown.py

"""
Notion のブロックツリーを Markdown 文字列に変換するモジュール。

入力は NotionPageService が組み立てたブロックのリスト。
子ブロックを持つブロックには "children" キーに子ブロックのリストが入っている前提で、
このモジュール自体は API を呼ばない（純粋関数のみ）。
"""

import logging
from typing import Any, Callable, Dict, List, Optional

logger = logging.getLogger(__name__)

Block = Dict[str, Any]

INDENT = "    "

# 連続する場合に 1 行改行だけで並べるブロック種別
_LIST_TYPES = {"bulleted_list_item", "numbered_list_item", "to_do"}

# 子ブロックをそのまま展開するだけのコンテナ種別
_CONTAINER_TYPES = {"column_list", "column", "synced_block"}


def rich_text_to_markdown(items: Optional[List[Dict[str, Any]]]) -> str:
    """
    rich_text 配列を Markdown のインライン表現に変換する。

    bold / italic / strikethrough / code の注釈とリンクに対応する。
    """
    if not items:
        return ""

    parts: List[str] = []
    for item in items:
        if item.get("type") == "equation":
            expression = (item.get("equation") or {}).get("expression", "")
            parts.append(f"${expression}$")
            continue

        text = item.get("plain_text")
        if text is None:
            text = (item.get("text") or {}).get("content", "")
        if not text.strip():
            parts.append(text)
            continue

        annotations = item.get("annotations") or {}
        if annotations.get("code"):
            text = f"`{text}`"
        if annotations.get("bold"):
            text = f"**{text}**"
        if annotations.get("italic"):
            text = f"_{text}_"
        if annotations.get("strikethrough"):
            text = f"~~{text}~~"

        href = item.get("href")
        if href:
            text = f"[{text}]({href})"

        parts.append(text)

    return "".join(parts)


def plain_text(items: Optional[List[Dict[str, Any]]]) -> str:
    """rich_text 配列から注釈なしのプレーンテキストを取り出す。"""
    if not items:
        return ""
    return "".join(item.get("plain_text", "") for item in items)


def _indent(text: str, prefix: str = INDENT) -> str:
    return "\n".join(f"{prefix}{line}" if line else line for line in text.split("\n"))


def _quote(text: str) -> str:
    return "\n".join(f"> {line}" if line else ">" for line in text.split("\n"))


def _children_markdown(block: Block) -> str:
    return blocks_to_markdown(block.get("children") or [])


def _with_nested(head: str, block: Block) -> str:
    """リスト項目などの直後に、インデントした子ブロックを続ける。"""
    nested = _children_markdown(block)
    if not nested:
        return head
    return f"{head}\n{_indent(nested)}"


def _file_url(payload: Dict[str, Any]) -> str:
    """image / video / file / pdf ブロックの URL を取り出す（external / file 共通）。"""
    source_type = payload.get("type")
    if not source_type:
        return ""
    source = payload.get(source_type) or {}
    return source.get("url", "")


def _render_paragraph(block: Block, payload: Dict[str, Any]) -> str:
    text = rich_text_to_markdown(payload.get("rich_text"))
    nested = _children_markdown(block)
    if nested:
        return f"{text}\n\n{_indent(nested)}" if text else _indent(nested)
    return text


def _render_heading(level: int) -> Callable[[Block, Dict[str, Any]], str]:
    def render(block: Block, payload: Dict[str, Any]) -> str:
        head = "#" * level + " " + rich_text_to_markdown(payload.get("rich_text"))
        # toggleable heading の中身は見出しの下にそのまま並べる
        nested = _children_markdown(block)
        return f"{head}\n\n{nested}" if nested else head

    return render


def _render_bulleted(block: Block, payload: Dict[str, Any]) -> str:
    return _with_nested("- " + rich_text_to_markdown(payload.get("rich_text")), block)


def _render_to_do(block: Block, payload: Dict[str, Any]) -> str:
    checkbox = "[x]" if payload.get("checked") else "[ ]"
    text = rich_text_to_markdown(payload.get("rich_text"))
    return _with_nested(f"- {checkbox} {text}", block)


def _render_toggle(block: Block, payload: Dict[str, Any]) -> str:
    summary = rich_text_to_markdown(payload.get("rich_text"))
    nested = _children_markdown(block)
    return f"<details>\n<summary>{summary}</summary>\n\n{nested}\n</details>"


def _render_quote(block: Block, payload: Dict[str, Any]) -> str:
    text = rich_text_to_markdown(payload.get("rich_text"))
    nested = _children_markdown(block)
    if nested:
        text = f"{text}\n\n{nested}"
    return _quote(text)


def _render_callout(block: Block, payload: Dict[str, Any]) -> str:
    text = rich_text_to_markdown(payload.get("rich_text"))
    icon = payload.get("icon") or {}
    if icon.get("type") == "emoji" and icon.get("emoji"):
        text = f"{icon['emoji']} {text}"
    nested = _children_markdown(block)
    if nested:
        text = f"{text}\n\n{nested}"
    return _quote(text)


def _render_code(block: Block, payload: Dict[str, Any]) -> str:
    language = payload.get("language") or ""
    if language == "plain text":
        language = "text"
    code = plain_text(payload.get("rich_text"))
    return f"```{language}\n{code}\n```"


def _render_equation(block: Block, payload: Dict[str, Any]) -> str:
    return f"$$\n{payload.get('expression', '')}\n$$"


def _render_divider(block: Block, payload: Dict[str, Any]) -> str:
    return "---"


def _render_image(block: Block, payload: Dict[str, Any]) -> str:
    url = _file_url(payload)
    if not url:
        return ""
    caption = plain_text(payload.get("caption"))
    return f"![{caption}]({url})"


def _render_file_link(block: Block, payload: Dict[str, Any]) -> str:
    url = _file_url(payload)
    if not url:
        return ""
    label = plain_text(payload.get("caption")) or payload.get("name") or block.get("type", "file")
    return f"[{label}]({url})"


def _render_bookmark(block: Block, payload: Dict[str, Any]) -> str:
    url = payload.get("url")
    if not url:
        return ""
    label = plain_text(payload.get("caption")) or url
    return f"[{label}]({url})"


def _render_table(block: Block, payload: Dict[str, Any]) -> str:
    """
    table_row の子ブロックを Markdown テーブルにする。

    Markdown のテーブルはヘッダー行が必須なので、先頭行を常にヘッダーとして扱う。
    """
    rows: List[List[str]] = []
    for row in block.get("children") or []:
        if row.get("type") != "table_row":
            continue
        cells = (row.get("table_row") or {}).get("cells") or []
        rows.append(
            [rich_text_to_markdown(cell).replace("|", "\\|").replace("\n", " ") for cell in cells]
        )
    if not rows:
        return ""

    width = max(len(row) for row in rows)
    lines: List[str] = []
    for index, row in enumerate(rows):
        padded = row + [""] * (width - len(row))
        lines.append("| " + " | ".join(padded) + " |")
        if index == 0:
            lines.append("| " + " | ".join("---" for _ in padded) + " |")
    return "\n".join(lines)


def _render_container(block: Block, payload: Dict[str, Any]) -> str:
    return _children_markdown(block)


def _render_child_page(block: Block, payload: Dict[str, Any]) -> str:
    title = payload.get("title") or ""
    return f"**{title}**" if title else ""


_RENDERERS: Dict[str, Callable[[Block, Dict[str, Any]], str]] = {
    "paragraph": _render_paragraph,
    "heading_1": _render_heading(1),
    "heading_2": _render_heading(2),
    "heading_3": _render_heading(3),
    "bulleted_list_item": _render_bulleted,
    "to_do": _render_to_do,
    "toggle": _render_toggle,
    "quote": _render_quote,
    "callout": _render_callout,
    "code": _render_code,
    "equation": _render_equation,
    "divider": _render_divider,
    "image": _render_image,
    "video": _render_file_link,
    "file": _render_file_link,
    "pdf": _render_file_link,
    "bookmark": _render_bookmark,
    "embed": _render_bookmark,
    "link_preview": _render_bookmark,
    "table": _render_table,
    "child_page": _render_child_page,
}


def render_block(block: Block, number: int = 1) -> str:
    """
    1 ブロック分（子ブロックを含む）の Markdown を返す。

    :param number: numbered_list_item の場合に使う連番
    """
    block_type = block.get("type") or ""
    payload = block.get(block_type) or {}

    if block_type == "numbered_list_item":
        text = rich_text_to_markdown(payload.get("rich_text"))
        return _with_nested(f"{number}. {text}", block)

    if block_type in _CONTAINER_TYPES:
        return _render_container(block, payload)

    renderer = _RENDERERS.get(block_type)
    if renderer is None:
        logger.debug("Skipping unsupported Notion block type: %s", block_type)
        return ""
    return renderer(block, payload)


def blocks_to_markdown(blocks: List[Block]) -> str:
    """
    ブロックのリストを 1 つの Markdown 文字列に変換する。

    - ブロック間は空行で区切る
    - 連続するリスト項目（箇条書き / 番号付き / ToDo）は改行 1 つで区切る
    - 番号付きリストは連続している間だけ 1, 2, 3 ... と採番する
    """
    chunks: List[str] = []
    previous_type: Optional[str] = None
    number = 0

    for block in blocks:
        if block.get("archived") or block.get("in_trash"):
            continue

        block_type = block.get("type")
        number = number + 1 if block_type == "numbered_list_item" else 0

        rendered = render_block(block, number=number or 1)
        if not rendered.strip():
            previous_type = block_type
            continue

        if chunks:
            if previous_type in _LIST_TYPES and block_type in _LIST_TYPES:
                chunks.append("\n")
            else:
                chunks.append("\n\n")
        chunks.append(rendered)
        previous_type = block_type

    return "".join(chunks).strip()
