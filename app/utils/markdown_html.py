"""
书籍HTML渲染

把章节的markdown文本转换为可打印的HTML文档（封面页、目录、章节），
用于 /book-preview 预览，版式与PDF导出保持一致
"""
import re
from html import escape
from typing import Iterable, List, Optional

PAGE_STYLES = {
    "A4": "@page { size: A4; margin: 1in; }",
    "US Letter": "@page { size: letter; margin: 1in; }",
    "6x9": "@page { size: 6in 9in; margin: 0.75in; }",
    "5x8": "@page { size: 5in 8in; margin: 0.5in; }",
}

BASE_STYLES = """
body { font-family: 'Times New Roman', serif; line-height: 1.6; color: #333; margin: 0; padding: 0; }
.page { page-break-after: always; padding: 1in; min-height: calc(100vh - 2in); }
.cover-page { display: flex; flex-direction: column; justify-content: center; align-items: center; text-align: center; height: 100vh; padding: 2in; }
.cover-title { font-size: 2.5em; font-weight: bold; margin-bottom: 0.5em; color: #2c3e50; }
.cover-author { font-size: 1.5em; color: #7f8c8d; margin-top: 2em; }
.cover-image { max-width: 300px; max-height: 400px; margin: 2em 0; border-radius: 8px; box-shadow: 0 4px 8px rgba(0,0,0,0.1); }
.toc { page-break-before: always; }
.toc h1 { text-align: center; font-size: 2em; margin-bottom: 1em; color: #2c3e50; }
.toc-entry { display: flex; justify-content: space-between; margin-bottom: 0.5em; padding-bottom: 0.25em; border-bottom: 1px dotted #bdc3c7; }
.chapter { page-break-before: always; }
.chapter h1 { font-size: 2em; color: #2c3e50; margin-bottom: 1em; padding-bottom: 0.5em; border-bottom: 2px solid #3498db; }
.chapter h2 { font-size: 1.5em; color: #34495e; margin-top: 1.5em; margin-bottom: 0.75em; }
.chapter h3 { font-size: 1.25em; color: #34495e; margin-top: 1.25em; margin-bottom: 0.5em; }
.chapter p { margin-bottom: 1em; text-align: justify; }
.chapter ul, .chapter ol { margin-bottom: 1em; padding-left: 2em; }
.chapter li { margin-bottom: 0.5em; }
.page-number { position: fixed; bottom: 0.5in; right: 0.5in; font-size: 0.9em; color: #7f8c8d; }
"""

_HEADER_RE = re.compile(r"^(#{1,3}) (.*)$")
_BULLET_RE = re.compile(r"^\s*- (.*)$")
_NUMBERED_RE = re.compile(r"^\s*\d+\. (.*)$")
_BOLD_RE = re.compile(r"\*\*(.*?)\*\*")
_ITALIC_RE = re.compile(r"\*(.*?)\*")

# 每章按5页估算目录页码
PAGES_PER_CHAPTER_ESTIMATE = 5


def get_page_styles(page_format: str) -> str:
    return PAGE_STYLES.get(page_format, PAGE_STYLES["A4"])


def _inline(text: str) -> str:
    text = _BOLD_RE.sub(r"<strong>\1</strong>", text)
    return _ITALIC_RE.sub(r"<em>\1</em>", text)


def format_chapter_content(content: str) -> str:
    """
    markdown子集转HTML：#/##/### 标题、粗体、斜体、无序/有序列表、段落

    文本先做HTML转义，再替换markdown标记
    """
    html_parts: List[str] = []
    paragraph: List[str] = []
    list_tag: Optional[str] = None

    def flush_paragraph():
        if paragraph:
            html_parts.append(f"<p>{_inline(' '.join(paragraph))}</p>")
            paragraph.clear()

    def close_list():
        nonlocal list_tag
        if list_tag:
            html_parts.append(f"</{list_tag}>")
            list_tag = None

    def open_list(tag: str):
        nonlocal list_tag
        if list_tag != tag:
            close_list()
            html_parts.append(f"<{tag}>")
            list_tag = tag

    for raw_line in escape(content, quote=False).splitlines():
        line = raw_line.rstrip()
        if not line.strip():
            flush_paragraph()
            close_list()
            continue

        header = _HEADER_RE.match(line)
        if header:
            flush_paragraph()
            close_list()
            level = len(header.group(1))
            html_parts.append(f"<h{level}>{_inline(header.group(2))}</h{level}>")
            continue

        bullet = _BULLET_RE.match(line)
        numbered = _NUMBERED_RE.match(line)
        if bullet or numbered:
            flush_paragraph()
            open_list("ul" if bullet else "ol")
            item = (bullet or numbered).group(1)
            html_parts.append(f"<li>{_inline(item)}</li>")
            continue

        if line == "---":
            flush_paragraph()
            close_list()
            html_parts.append("<hr>")
            continue

        # 列表项的续行并入段落
        close_list()
        paragraph.append(line.strip())

    flush_paragraph()
    close_list()
    return "\n".join(html_parts)


def render_book_html(
    title: str,
    author: str,
    chapters: Iterable,
    cover_url: Optional[str] = None,
    include_toc: bool = True,
    page_format: str = "A4",
) -> str:
    """
    渲染整本书的HTML

    Args:
        chapters: 具有 chapter_number / chapter_title / content 属性的章节对象
    """
    chapters = list(chapters)
    safe_title = escape(title)
    safe_author = escape(author)

    parts = [
        "<!DOCTYPE html>",
        '<html lang="en">',
        "<head>",
        '<meta charset="UTF-8">',
        '<meta name="viewport" content="width=device-width, initial-scale=1.0">',
        f"<title>{safe_title}</title>",
        f"<style>\n{get_page_styles(page_format)}\n{BASE_STYLES}</style>",
        "</head>",
        "<body>",
        '<div class="page cover-page">',
    ]
    if cover_url:
        parts.append(f'<img src="{escape(cover_url)}" alt="Book Cover" class="cover-image">')
    parts.append(f'<h1 class="cover-title">{safe_title}</h1>')
    parts.append(f'<p class="cover-author">by {safe_author}</p>')
    parts.append("</div>")

    if include_toc:
        parts.append('<div class="page toc">')
        parts.append("<h1>Table of Contents</h1>")
        for index, chapter in enumerate(chapters):
            parts.append(
                '<div class="toc-entry">'
                f"<span>Chapter {chapter.chapter_number}: {escape(chapter.chapter_title)}</span>"
                f"<span>{index * PAGES_PER_CHAPTER_ESTIMATE + 3}</span>"
                "</div>"
            )
        parts.append("</div>")

    first_page = 3 if include_toc else 2
    for index, chapter in enumerate(chapters):
        page_number = first_page + index * PAGES_PER_CHAPTER_ESTIMATE
        parts.append('<div class="page chapter">')
        parts.append(f"<h1>Chapter {chapter.chapter_number}: {escape(chapter.chapter_title)}</h1>")
        parts.append(format_chapter_content(chapter.content))
        parts.append(f'<div class="page-number">{page_number}</div>')
        parts.append("</div>")

    parts.append("</body>")
    parts.append("</html>")
    return "\n".join(parts)
