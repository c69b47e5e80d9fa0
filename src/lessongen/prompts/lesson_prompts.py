"""Prompts for lesson preview-card generation.

Lessons are written for primary-school science pupils reading on their own,
so the prompt fixes the section layout, length, tone and safety rules.
"""

from lessongen.config import DEFAULT_COURSE_LABEL
from lessongen.validators.schema import OutlineEntry

SYSTEM_PROMPT = "你是严谨的中文科普写作者与小学科学教师。"

UNIT_PLACEHOLDER = "（未提供）"
HINT_PLACEHOLDER = "无"

# `##` headers every generated lesson is asked to contain, in order
REQUIRED_SECTIONS = [
    "预习目标",
    "关键词小卡片",
    "预习问题",
    "安全小实验/观察",
    "趣味拓展",
    "练一练",
]

IMAGE_KEYWORD_MARKER = "unsplash:"

LESSON_PROMPT_HEADER = """你是一名小学科学老师，为“{course_label}”制作【孩子自己能读懂】的每课预习卡（用于纯静态网页）。

请输出一篇 Markdown（不要代码块包裹），结构必须包含以下小标题（## 级别）：

## 预习目标（3条，动词开头，短句）
## 关键词小卡片（4-5个词，每个≤12字解释）
## 预习问题（3题：2题理解 + 1题生活化）
## 安全小实验/观察（1个，材料家里常见，步骤≤4步，含安全提示）
## 趣味拓展（2条，每条≤25字，偏生活应用/科学史冷知识）
## 练一练（3题：1道选择 + 2道简答；难度中等；**在题目下方立即给出答案与简要解析**）
"""

IMAGE_DIRECTIVE = """
【图片要求】在练一练后面加一行：{marker} 描述词（英文，1-3个关键词，用来找合适的免费图片，如 "science experiment kids"）
"""

LESSON_PROMPT_FOOTER = """
【长度要求】除标题外，正文总字数尽量控制在约 300–420 字，句子短、节奏快、读起来像“闯关卡”。

【安全与真实】不编造教材页码与权威引用；不包含危险化学品/明火/密闭容器产气等操作；强调在家可安全完成。

本课信息：
- 单元：{unit}
- 课题：{title}
- 提示：{hint}

最后加一行：打印版提示（1句话）。"""


def build_lesson_prompt(
    entry: OutlineEntry,
    include_image_directive: bool = True,
    course_label: str = DEFAULT_COURSE_LABEL,
) -> str:
    """Build the user prompt for one lesson.

    Args:
        entry: Outline entry to write the lesson for
        include_image_directive: Ask the model for an `unsplash:` keyword line
        course_label: Grade/textbook the lessons belong to

    Returns:
        Prompt string
    """
    parts = [LESSON_PROMPT_HEADER.format(course_label=course_label)]
    if include_image_directive:
        parts.append(IMAGE_DIRECTIVE.format(marker=IMAGE_KEYWORD_MARKER))
    parts.append(
        LESSON_PROMPT_FOOTER.format(
            unit=entry.unit or UNIT_PLACEHOLDER,
            title=entry.title,
            hint=entry.summary_hint or HINT_PLACEHOLDER,
        )
    )
    return "".join(parts)
