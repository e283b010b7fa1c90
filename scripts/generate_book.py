#!/usr/bin/env python3
"""
命令行运行完整的图书生成向导
想法 → 目录 → 全部章节 → 封面(可选) → PDF(可选)

用法：
  python scripts/generate_book.py -t "标题" -a "作者" -i "图书想法"
  python scripts/generate_book.py -t ... -a ... -i ... --depth polished --cover --pdf
  python scripts/generate_book.py ... --preview book.html
"""
import asyncio
import logging
from pathlib import Path
from typing import Optional

import click

from app.core.exceptions import BookServiceError
from app.schemas.book import BookRequest, ContentDepth, ColorScheme, DesignStyle, PageFormat, PDFRequest, PDFChapter
from app.services.book_generator import book_generator
from app.services.wizard import BookWizard, WizardContext


async def run_wizard(
    book: BookRequest,
    depth: ContentDepth,
    cover: bool,
    pdf: bool,
    color_scheme: ColorScheme,
    design_style: DesignStyle,
    page_format: PageFormat,
    preview: Optional[Path],
) -> WizardContext:
    context = WizardContext(book=book)
    context.content_settings.content_depth = depth
    context.cover_settings.color_scheme = color_scheme
    context.cover_settings.design_style = design_style
    context.export_settings.page_format = page_format
    wizard = BookWizard(context)

    # 想法 → 目录
    wizard.advance()
    toc = await wizard.generate_outline()
    click.echo(f"📚 目录已生成（{len(toc)}章）：")
    for index, section in enumerate(toc, start=1):
        click.echo(f"  {index}. {section.section_name}  [{section.estimated_pages}页]")
    min_pages, max_pages = context.toc_page_range
    min_words, max_words = context.toc_word_range
    click.echo(f"  预计 {min_pages}-{max_pages}页 / {min_words}-{max_words}词")

    # 内容
    chapters = await wizard.generate_all_chapters()
    click.echo(f"✍️  章节已生成：{len(chapters)}/{len(toc)}")
    for number, error in sorted(context.chapter_errors.items()):
        click.echo(f"  ❌ 第{number}章失败: {error}", err=True)
    for number, chapter in sorted(chapters.items()):
        click.echo(f"  {number}. {chapter.chapter_title} - {chapter.word_count}词 / {chapter.estimated_pages}页")
    if not chapters:
        click.echo("没有可导出的章节", err=True)
        return context

    wizard.advance()  # → 导出

    if preview:
        html = book_generator.render_preview(PDFRequest(
            title=book.title,
            author=book.author,
            chapters=[
                PDFChapter(chapter_number=c.chapter_number, chapter_title=c.chapter_title, content=c.content)
                for _, c in sorted(chapters.items())
            ],
            cover_url=context.cover_url,
            page_format=page_format,
        ))
        preview.write_text(html, encoding="utf-8")
        click.echo(f"🖥  HTML预览已写入: {preview}")

    if pdf:
        try:
            result = await wizard.export_pdf()
            click.echo(f"📄 PDF: {result.pdf_url} ({result.total_pages}页, {result.file_size_mb}MB)")
        except BookServiceError as e:
            click.echo(f"❌ PDF导出失败: {e}", err=True)

    wizard.advance()  # → 封面

    if cover:
        try:
            result = await wizard.generate_cover()
            click.echo(f"🎨 封面: {result.cover_url[:80]}...")
        except BookServiceError as e:
            click.echo(f"❌ 封面生成失败: {e}", err=True)

    stats = context.stats
    click.echo(f"总计 {stats.total_pages}页 / {stats.word_count}词 / 阅读约{stats.reading_time}")
    return context


@click.command()
@click.option("--title", "-t", required=True, help="书名")
@click.option("--author", "-a", required=True, help="作者")
@click.option("--idea", "-i", required=True, help="图书想法")
@click.option("--pages", "-p", default=100, show_default=True, type=int, help="目标页数")
@click.option("--depth", type=click.Choice([d.value for d in ContentDepth]), default=ContentDepth.DRAFT.value,
              show_default=True, help="内容深度")
@click.option("--cover", is_flag=True, help="生成封面")
@click.option("--pdf", is_flag=True, help="导出PDF")
@click.option("--color-scheme", type=click.Choice([c.value for c in ColorScheme]),
              default=ColorScheme.PROFESSIONAL.value, show_default=True)
@click.option("--design-style", type=click.Choice([s.value for s in DesignStyle]),
              default=DesignStyle.MODERN.value, show_default=True)
@click.option("--page-format", type=click.Choice([f.value for f in PageFormat]),
              default=PageFormat.A4.value, show_default=True)
@click.option("--preview", type=click.Path(dir_okay=False, path_type=Path), default=None,
              help="把HTML预览写入文件")
@click.option("--verbose", "-v", is_flag=True, help="输出调试日志")
def main(title, author, idea, pages, depth, cover, pdf, color_scheme, design_style, page_format, preview, verbose):
    """运行图书生成向导"""
    logging.basicConfig(level=logging.DEBUG if verbose else logging.WARNING)

    book = BookRequest(title=title, author=author, book_idea=idea, num_pages=pages)
    asyncio.run(run_wizard(
        book,
        depth=ContentDepth(depth),
        cover=cover,
        pdf=pdf,
        color_scheme=ColorScheme(color_scheme),
        design_style=DesignStyle(design_style),
        page_format=PageFormat(page_format),
        preview=preview,
    ))


if __name__ == "__main__":
    main()
