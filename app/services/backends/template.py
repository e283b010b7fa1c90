"""
本地模板后端
不依赖任何外部服务，输出确定
"""
import logging
from typing import List

from app.schemas.book import (
    TOCRequest, TOCResponse, TOCSection,
    ContentRequest, ChapterResponse, ContentDepth,
    CoverRequest, CoverResponse,
)
from app.services.backends.base import GenerationBackend
from app.utils.cover_art import get_color_palette, render_placeholder_cover
from app.utils.page_math import count_words, estimate_pages

logger = logging.getLogger(__name__)

FALLBACK_TOC = [
    ("Introduction", ["Overview", "Background", "Objectives"], "10-12"),
    ("Main Content", ["Core concepts", "Key principles", "Examples"], "40-50"),
    ("Conclusion", ["Summary", "Key takeaways", "Next steps"], "10-15"),
]


# === 章节模板 ===

def render_outline(chapter_title: str, ideas: List[str]) -> str:
    items = "\n\n".join(
        f"{index}. **{idea}**\n"
        "   - Key points to cover\n"
        "   - Supporting examples\n"
        "   - Practical applications"
        for index, idea in enumerate(ideas, start=1)
    )
    return f"""# {chapter_title}

## Chapter Outline

{items}

## Key Takeaways
- Main concept summary
- Actionable insights
- Connection to next chapter

## Discussion Questions
- How does this relate to your experience?
- What are the practical implications?
- What questions remain to be explored?
"""


def render_introduction(chapter_title: str, book_idea: str) -> str:
    return f"""Welcome to this exploration of {chapter_title.lower()}. In this chapter, we'll dive deep into the core concepts that form the foundation of our understanding.

Building on the themes established in "{book_idea[:100]}...", this chapter serves as a crucial stepping stone in your learning journey. We'll examine not just the theoretical framework, but also the practical applications that make these concepts valuable in real-world scenarios.

By the end of this chapter, you'll have gained:
- A comprehensive understanding of the key principles
- Practical tools for implementation
- Insights into common challenges and solutions
- A foundation for the advanced topics we'll explore later

Let's begin this important phase of our exploration."""


def render_section(idea: str, section_number: int) -> str:
    topic = idea.lower()
    return f"""## {section_number}. {idea}

This section focuses on {topic}, which represents a fundamental aspect of our overall framework. Understanding this concept is essential for building a comprehensive knowledge base.

### Core Principles

The foundation of {topic} rests on several key principles that guide both theoretical understanding and practical application. These principles have been developed through extensive research and real-world testing.

### Practical Applications

In practice, {topic} manifests in various ways depending on the context and specific requirements. Here are some common scenarios where these concepts prove particularly valuable:

- **Scenario 1**: Direct application in standard situations
- **Scenario 2**: Adaptation for complex environments
- **Scenario 3**: Integration with existing systems and processes

### Common Challenges

While implementing {topic}, practitioners often encounter several recurring challenges. Understanding these potential obstacles helps in developing effective strategies for success:

1. **Challenge 1**: Resource allocation and prioritization
2. **Challenge 2**: Stakeholder alignment and communication
3. **Challenge 3**: Measurement and evaluation of outcomes

### Best Practices

Based on extensive experience and research, several best practices have emerged for effectively working with {topic}:

- Start with clear objectives and success criteria
- Maintain regular communication with all stakeholders
- Document processes and decisions for future reference
- Continuously evaluate and adjust approaches based on results

### Case Study Example

Consider a real-world example where {topic} played a crucial role in achieving success. This case demonstrates the practical value of the concepts we've discussed and provides concrete evidence of their effectiveness.

The implementation process involved careful planning, stakeholder engagement, and iterative refinement. The results exceeded expectations and provided valuable insights for future applications."""


def render_conclusion(chapter_title: str, ideas: List[str]) -> str:
    insights = "\n".join(
        f"{index}. **{idea}**: We explored the fundamental principles and practical applications"
        for index, idea in enumerate(ideas, start=1)
    )
    return f"""## Chapter Conclusion

As we conclude our exploration of {chapter_title.lower()}, it's important to reflect on the key insights we've gained and how they contribute to our overall understanding.

### Key Insights

Throughout this chapter, we've examined {len(ideas)} major areas:

{insights}

### Integration and Synthesis

These concepts don't exist in isolation; they work together to create a comprehensive framework for understanding and action. The interconnections between these ideas form the foundation for the more advanced topics we'll explore in subsequent chapters.

### Moving Forward

The knowledge gained in this chapter prepares us for the next phase of our journey. In the following chapter, we'll build upon these foundations to explore more complex applications and advanced strategies.

Take time to reflect on the concepts presented here and consider how they might apply to your specific situation. The practical exercises at the end of this chapter will help reinforce your understanding and prepare you for what's ahead."""


def render_draft(chapter_title: str, ideas: List[str], book_idea: str, title: str) -> str:
    main_content = "\n\n".join(
        render_section(idea, index) for index, idea in enumerate(ideas, start=1)
    )
    return f"""# {chapter_title}

{render_introduction(chapter_title, book_idea)}

{main_content}

{render_conclusion(chapter_title, ideas)}

---

*This chapter provides foundational knowledge that will be built upon in subsequent sections of "{title}". The concepts presented here are essential for understanding the broader framework we'll explore throughout this book.*
"""


def render_polished(chapter_title: str, ideas: List[str], book_idea: str, title: str) -> str:
    summary = "\n".join(
        f"- **{idea}**: Comprehensive understanding and practical applications" for idea in ideas
    )
    return render_draft(chapter_title, ideas, book_idea, title) + f"""

## Chapter Summary

This chapter has explored the fundamental aspects of {chapter_title.lower()}, providing you with:

{summary}

## Practical Exercises

1. **Reflection Exercise**: Consider how the concepts in this chapter apply to your current situation.

2. **Implementation Challenge**: Choose one key concept and create an action plan for implementation.

3. **Knowledge Check**: Review the main points and identify areas for further exploration.

## Further Reading

- Additional resources for deeper understanding
- Related research and case studies
- Expert perspectives and alternative viewpoints

## Next Steps

In the following chapter, we'll build upon these foundations to explore [preview of next chapter content]. The journey continues as we delve deeper into the practical applications of these concepts.
"""


def render_chapter(
    chapter_title: str, ideas: List[str], depth: ContentDepth, book_idea: str, title: str
) -> str:
    if depth == ContentDepth.OUTLINE:
        return render_outline(chapter_title, ideas)
    if depth == ContentDepth.POLISHED:
        return render_polished(chapter_title, ideas, book_idea, title)
    return render_draft(chapter_title, ideas, book_idea, title)


class TemplateGenerationBackend(GenerationBackend):
    name = "template"

    async def generate_outline(self, request: TOCRequest) -> TOCResponse:
        toc = [
            TOCSection(section_name=name, section_ideas=list(ideas), estimated_pages=pages)
            for name, ideas, pages in FALLBACK_TOC
        ]
        return TOCResponse(
            toc=toc,
            total_estimated_pages=str(request.num_pages),
            book_summary=f'This book "{request.title}" by {request.author} explores {request.book_idea[:100]}...',
        )

    async def generate_chapter(self, request: ContentRequest, chapter_number: int) -> ChapterResponse:
        section = request.toc[chapter_number - 1]
        content = render_chapter(
            section.section_name,
            section.section_ideas,
            request.content_depth,
            request.book_idea,
            request.title,
        )
        word_count = count_words(content)
        return ChapterResponse(
            chapter_number=chapter_number,
            chapter_title=section.section_name,
            content=content,
            word_count=word_count,
            estimated_pages=estimate_pages(word_count),
        )

    async def generate_cover(self, request: CoverRequest) -> CoverResponse:
        color_scheme = request.color_scheme.value
        design_style = request.design_style.value
        logger.info(f"使用占位封面: {design_style}/{color_scheme}")
        return CoverResponse(
            cover_url=render_placeholder_cover(request.title, request.author, design_style, color_scheme),
            design_description=(
                f'A {design_style} book cover design featuring "{request.title}" by {request.author}. '
                f"The design incorporates {color_scheme} colors and reflects the book's theme of "
                f"{request.book_description[:100]}..."
            ),
            color_palette=get_color_palette(color_scheme),
        )
