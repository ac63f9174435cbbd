"""AI-powered content tools."""

import re
from typing import Any, Dict, List

from application.models import FieldSpec, FieldType, PromptBuilder, Tier, ToolDescriptor

COPYWRITER_SYSTEM_PROMPT = (
    "You are an experienced business copywriter. Write clear, accurate copy "
    "for small businesses. Never invent facts that were not provided."
)

_LIST_MARKER = re.compile(r"^\s*(?:[-*#]+|\d+[.)])\s*")

TONES = {
    "professional": "Professional",
    "friendly": "Friendly",
    "playful": "Playful",
}


def build_product_description_prompt(inputs: Dict[str, Any]) -> str:
    lines = [
        f"Write a product description for \"{inputs['product_name']}\".",
        f"Key features: {inputs['features']}",
        f"Tone: {inputs.get('tone', 'professional')}.",
    ]
    if inputs.get("audience"):
        lines.append(f"Target audience: {inputs['audience']}")
    lines.append("Keep it under 150 words and end with a call to action.")
    return "\n".join(lines)


def build_blog_outline_prompt(inputs: Dict[str, Any]) -> str:
    prompt = (
        f"Create a blog post outline about \"{inputs['topic']}\" with "
        f"{inputs['sections']} section headings. "
        "Return one heading per line, without numbering or bullet characters."
    )
    if inputs.get("keywords"):
        prompt += f" Work in these keywords: {inputs['keywords']}."
    return prompt


def parse_outline(content: str) -> Dict[str, List[str]]:
    headings = [_LIST_MARKER.sub("", line).strip() for line in content.splitlines()]
    return {"headings": [h for h in headings if h]}


PRODUCT_DESCRIPTION_GENERATOR = ToolDescriptor(
    slug="product-description-generator",
    name="Product Description Generator",
    description="Turn a product's features into ready-to-publish copy",
    category="content",
    required_tier=Tier.STARTER,
    icon="dashicons-edit",
    color="#14b8a6",
    behavior=PromptBuilder(
        build_prompt=build_product_description_prompt,
        system_prompt=COPYWRITER_SYSTEM_PROMPT,
    ),
    fields=(
        FieldSpec(name="product_name", label="Product Name", type=FieldType.TEXT),
        FieldSpec(name="features", label="Key Features", type=FieldType.TEXT),
        FieldSpec(name="audience", label="Target Audience", type=FieldType.TEXT, required=False),
        FieldSpec(name="tone", label="Tone", type=FieldType.SELECT, options=TONES),
    ),
)

BLOG_OUTLINE_GENERATOR = ToolDescriptor(
    slug="blog-outline-generator",
    name="Blog Outline Generator",
    description="Draft a structured outline for a blog post",
    category="content",
    required_tier=Tier.PRO,
    icon="dashicons-welcome-write-blog",
    color="#14b8a6",
    behavior=PromptBuilder(
        build_prompt=build_blog_outline_prompt,
        system_prompt=COPYWRITER_SYSTEM_PROMPT,
        parse_response=parse_outline,
    ),
    fields=(
        FieldSpec(name="topic", label="Topic", type=FieldType.TEXT),
        FieldSpec(name="keywords", label="Keywords", type=FieldType.TEXT, required=False),
        FieldSpec(name="sections", label="Number of Sections", type=FieldType.INTEGER, min=3, max=10),
    ),
)

CONTENT_TOOLS = (PRODUCT_DESCRIPTION_GENERATOR, BLOG_OUTLINE_GENERATOR)
