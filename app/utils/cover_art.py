"""
封面提示词与占位封面

上游封面服务不可用时，本地绘制400x600的SVG占位图并以data URL返回
"""
import base64
from typing import List, Optional
from xml.sax.saxutils import escape

DEFAULT_COLOR_SCHEME = "professional"

COLOR_PALETTES = {
    "professional": ["#2563eb", "#1e40af", "#3b82f6", "#60a5fa", "#93c5fd"],
    "vibrant": ["#dc2626", "#ea580c", "#d97706", "#65a30d", "#059669"],
    "monochrome": ["#374151", "#4b5563", "#6b7280", "#9ca3af", "#d1d5db"],
    "warm": ["#dc2626", "#ea580c", "#f59e0b", "#eab308", "#84cc16"],
    "cool": ["#0891b2", "#0284c7", "#2563eb", "#7c3aed", "#9333ea"],
}

DESIGN_STYLE_PROMPTS = {
    "modern": "Modern, clean design with contemporary typography and sleek layout. ",
    "classic": "Classic, elegant design with traditional typography and timeless appeal. ",
    "minimalist": "Minimalist design with plenty of white space and simple, clean elements. ",
    "bold": "Bold, eye-catching design with strong visual elements and dynamic composition. ",
}

COLOR_SCHEME_PROMPTS = {
    "professional": "Professional color palette with blues, grays, and whites. ",
    "vibrant": "Vibrant, energetic colors that grab attention. ",
    "monochrome": "Monochromatic color scheme with varying shades of a single color. ",
    "warm": "Warm color palette with reds, oranges, and yellows. ",
    "cool": "Cool color palette with blues, greens, and purples. ",
}


def get_color_palette(color_scheme: str) -> List[str]:
    """未知配色回退到professional"""
    return list(COLOR_PALETTES.get(color_scheme, COLOR_PALETTES[DEFAULT_COLOR_SCHEME]))


def get_contrast_color(hex_color: str) -> str:
    r = int(hex_color[1:3], 16)
    g = int(hex_color[3:5], 16)
    b = int(hex_color[5:7], 16)
    brightness = (r * 299 + g * 587 + b * 114) / 1000
    return "#000000" if brightness > 128 else "#ffffff"


def wrap_text(text: str, max_length: int) -> str:
    """按词折行，只返回第一行"""
    if len(text) <= max_length:
        return text

    lines = []
    current_line = ""
    for word in text.split(" "):
        if len(current_line + word) <= max_length:
            current_line += (" " if current_line else "") + word
        else:
            if current_line:
                lines.append(current_line)
            current_line = word
    if current_line:
        lines.append(current_line)

    return lines[0] if lines else text[:max_length]


def build_cover_prompt(
    title: str,
    author: str,
    description: str,
    style_prompt: Optional[str] = None,
    color_scheme: str = DEFAULT_COLOR_SCHEME,
    design_style: str = "modern",
) -> str:
    """拼装发给图像生成服务的自然语言提示词"""
    prompt = f'Professional book cover design for "{title}" by {author}. '
    prompt += f"The book is about: {description[:200]}. "
    prompt += DESIGN_STYLE_PROMPTS.get(design_style, "")
    prompt += COLOR_SCHEME_PROMPTS.get(color_scheme, "")
    if style_prompt:
        prompt += f"Additional style requirements: {style_prompt}. "
    prompt += (
        "High quality, professional book cover suitable for both print and digital formats. "
        "Include title and author name prominently. Book cover aspect ratio 512x768 pixels."
    )
    return prompt


def _design_elements(design_style: str, colors: List[str]) -> str:
    if design_style == "modern":
        return (
            f'<rect x="50" y="250" width="300" height="2" fill="{colors[2]}" opacity="0.7"/>'
            f'<circle cx="350" cy="100" r="30" fill="{colors[2]}" opacity="0.3"/>'
            f'<rect x="20" y="350" width="60" height="60" fill="{colors[3]}" opacity="0.4"/>'
        )
    if design_style == "classic":
        return (
            f'<rect x="30" y="30" width="340" height="540" fill="none" stroke="{colors[2]}" stroke-width="1" opacity="0.6"/>'
            f'<rect x="40" y="40" width="320" height="520" fill="none" stroke="{colors[2]}" stroke-width="1" opacity="0.4"/>'
        )
    if design_style == "minimalist":
        return f'<line x1="100" y1="250" x2="300" y2="250" stroke="{colors[2]}" stroke-width="1" opacity="0.5"/>'
    if design_style == "bold":
        return (
            f'<polygon points="0,0 100,0 80,100 0,80" fill="{colors[2]}" opacity="0.6"/>'
            f'<polygon points="400,600 300,600 320,500 400,520" fill="{colors[3]}" opacity="0.6"/>'
            f'<circle cx="350" cy="150" r="40" fill="{colors[4]}" opacity="0.4"/>'
        )
    return ""


def render_placeholder_svg(title: str, author: str, design_style: str, color_scheme: str) -> str:
    colors = get_color_palette(color_scheme)
    primary, secondary = colors[0], colors[1]
    text_color = get_contrast_color(primary)

    return f"""<svg width="400" height="600" xmlns="http://www.w3.org/2000/svg">
  <defs>
    <linearGradient id="grad1" x1="0%" y1="0%" x2="100%" y2="100%">
      <stop offset="0%" style="stop-color:{primary};stop-opacity:1" />
      <stop offset="100%" style="stop-color:{secondary};stop-opacity:1" />
    </linearGradient>
  </defs>
  <rect width="400" height="600" fill="url(#grad1)"/>
  {_design_elements(design_style, colors)}
  <text x="200" y="200" font-family="serif" font-size="28" font-weight="bold"
        text-anchor="middle" fill="{text_color}">{escape(wrap_text(title, 20))}</text>
  <text x="200" y="500" font-family="sans-serif" font-size="18"
        text-anchor="middle" fill="{text_color}">by {escape(author)}</text>
  <rect x="10" y="10" width="380" height="580"
        fill="none" stroke="{text_color}" stroke-width="2" opacity="0.5"/>
</svg>"""


def render_placeholder_cover(title: str, author: str, design_style: str, color_scheme: str) -> str:
    """SVG占位封面的base64 data URL"""
    svg = render_placeholder_svg(title, author, design_style, color_scheme)
    encoded = base64.b64encode(svg.encode("utf-8")).decode("ascii")
    return f"data:image/svg+xml;base64,{encoded}"
