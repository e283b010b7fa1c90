"""
页数与字数估算

所有生成接口共用同一套换算规则：约300词/页；
目录阶段的全书估算给出区间，按每页250到350词
"""
import math
import re
from typing import Iterable, List, Tuple

WORDS_PER_PAGE = 300


def count_words(text: str) -> int:
    """按空白切分统计词数"""
    return len(text.split())


def estimate_pages(word_count: int) -> int:
    return math.ceil(word_count / WORDS_PER_PAGE)


def distribute_pages(total_pages: int, chapter_count: int) -> List[int]:
    """
    把总页数平均分配到各章，余数依次分给前面的章节

    >>> distribute_pages(100, 5)
    [20, 20, 20, 20, 20]
    >>> distribute_pages(7, 3)
    [3, 2, 2]
    """
    if chapter_count <= 0:
        return []
    base, remainder = divmod(total_pages, chapter_count)
    return [base + (1 if index < remainder else 0) for index in range(chapter_count)]


def page_range(pages: int) -> str:
    """章节页数区间，上限比下限多2页"""
    if pages <= 0:
        return "1-2"
    return f"{pages}-{pages + 2}"


def estimate_file_size_mb(word_count: int) -> float:
    return round(word_count / 1000 * 0.1, 2)


def estimate_reading_minutes(total_pages: int) -> int:
    # 每分钟约2页
    return math.ceil(total_pages / 2)


# 目录页数区间里的 "a-b"；不匹配时取开头的整数
_RANGE_RE = re.compile(r"(\d+)-(\d+)")
_LEADING_INT_RE = re.compile(r"\s*([+-]?\d+)")

MIN_WORDS_PER_PAGE = 250
MAX_WORDS_PER_PAGE = 350


def toc_page_totals(page_ranges: Iterable[str]) -> Tuple[int, int]:
    """
    汇总目录各章的页数区间，无法解析的条目跳过

    >>> toc_page_totals(["20-22", "15", "n/a"])
    (35, 37)
    """
    min_total = max_total = 0
    for pages in page_ranges:
        match = _RANGE_RE.search(pages or "")
        if match:
            min_total += int(match.group(1))
            max_total += int(match.group(2))
            continue
        single = _LEADING_INT_RE.match(pages or "")
        if single:
            min_total += int(single.group(1))
            max_total += int(single.group(1))
    return min_total, max_total


def word_count_range(min_pages: int, max_pages: int) -> Tuple[int, int]:
    """按每页250到350词估算全书字数区间"""
    return min_pages * MIN_WORDS_PER_PAGE, max_pages * MAX_WORDS_PER_PAGE
