"""Prompt templates for the classification and Q&A transform stages."""

from __future__ import annotations

from typing import Optional


CLASSIFICATION_CONTENT_LIMIT = 3000

CLASSIFIER_SYSTEM_PROMPT = (
    "You are a content classifier for public policy-related news articles. "
    "Always respond with valid JSON only, no additional text."
)

CLASSIFICATION_PROMPT = """You are an expert content classifier specializing in public policy and government-related news.

Your task is to evaluate news articles and determine if they are INTERESTING for creating short-form, public-facing explainer content about public policy.

## Classification Criteria

An article is INTERESTING if it meets ALL of the following conditions:

1. **Public Policy Relevance**: The article discusses government policies, schemes, tools, regulations, laws, or governance decisions that affect citizens.

2. **Maps to Content Pillars**: The content must clearly relate to at least one of these pillars:
   - SCHEMES: Government programs with defined eligibility and benefits
   - TOOLS: Government apps, portals, or systems for citizen access
   - CURRENT AFFAIRS IN INDIA: Time-bound developments affecting everyday life
   - INDIA AND THE WORLD: International agreements, diplomacy, trade affecting India
   - RULES, ACTS, BILLS: Legal instruments creating or changing rights/duties
   - CASE STUDIES: Real-world examples of policy implementation

3. **Real-World Impact**: The article has consequences for at least one of:
   - Money (financial impact)
   - Eligibility (who qualifies)
   - Rights (legal rights)
   - Penalties (compliance requirements)
   - Access to services
   - Compliance or responsibility

4. **Source Credibility**: The article cites or references:
   - Government notifications, gazette releases, ministry websites (highest weight)
   - Reputed national media citing official documents (medium weight)
   - Avoid: Opinion columns, speculation, or unnamed sources (lowest weight)

5. **Clarity Potential**: The article can be explained in simple language for a 30-60 second explainer that resolves confusion or clarifies policy impact.

## What to AVOID

An article is NOT INTERESTING if it:
- Is purely political commentary or opinion without policy substance
- Focuses on personality-driven stories without policy impact
- Contains only speculation without official backing
- Uses outrage framing without clear policy implications
- Lacks connection to government action or citizen impact

## Output Format

Respond with ONLY a JSON object in this exact format:
{{
  "is_interesting": true or false,
  "reasoning": "Brief explanation (1-2 sentences) of why this classification was made",
  "content_pillar": "The primary pillar this maps to (if interesting), or null",
  "policy_anchor": "The specific scheme/rule/law/tool mentioned (if applicable), or null"
}}

## Article to Classify

Title: {title}

Content: {content}

URL: {url}

Now classify this article:"""

TRANSFORMER_SYSTEM_PROMPT = (
    "You are an expert at turning complex articles and reports into clear, public-facing Q&A explainers. "
    "Output only the finished Q&A explainer. Use markdown for tables, lists, and section headers. "
    'Do not add any preamble, meta-commentary, or "Here is the converted content" style text.'
)

CONTENT_TO_QA_PROMPT = """Task:
I have a block of information or article content. Convert it into a clear, public-facing Q&A explainer that can be published directly.

Goal

The output should be easy to understand for a layperson with no prior background.
It should read like a finished explainer, not draft notes or research material.

Question Style

Questions should reflect real audience doubts: simple, curious, and natural.
Avoid academic, robotic, or overly formal phrasing.
Questions should follow a logical progression, where each builds on the previous one and provides context for what comes next.

Answer Style

Use plain, everyday language.
Explain concepts step by step, assuming the reader is intelligent but non-technical.
Avoid jargon wherever possible. If unavoidable, explain it immediately using a simple real-world example.
Maintain a conversational and human tone.
Make the content data-rich: clearly surface numbers, dates, comparisons, and concrete facts.
Use:
Tables where comparisons, timelines, benefits, costs, or statistics are easier to scan.
Short lists for conditions, impacts, eligibility, or options.
Use paragraphs for explanations and context. Mix formats intelligently to maximize clarity.

Structure

Do not force a rigid template.
Follow a natural learning flow, typically moving from:
What it is
How it works
Who it affects
What has changed
Risks or implications
What happens next
Group related questions into clearly labeled sections.
Section headers should be specific and meaningful.
The flow should feel progressive and intuitive, without abrupt jumps.

Completeness

Do not omit any details from the source content.
Every number, date, example, claim, and insight must be reflected somewhere in the Q&A.
Clearly label information that is reported, interpreted, or not officially confirmed.

Sources

At the end of each answer, include source links exactly as provided.
If multiple sources apply, list all of them.
For PDF sources, include the page number along with the link.
Sources must directly support the claims made in the answer.

Output Expectation

The final output must be a fully finished, publishable Q&A explainer.
It should feel written for real people, not researchers or internal stakeholders.
A first-time reader should understand the topic without external references.
The Q&A should flow smoothly from start to finish, with no gaps in understanding.
Every question and answer should feel intentional, complete, and necessary.

---

Source article title: {title}

Source URL: {url}

---

Raw article content to convert:

{content}

---

Convert the above content into the Q&A explainer format. Output only the finished Q&A explainer (no preamble or meta-commentary)."""


def format_classification_prompt(title: Optional[str], content: Optional[str], url: Optional[str]) -> str:
    return CLASSIFICATION_PROMPT.format(
        title=title or "N/A",
        content=(content or "")[:CLASSIFICATION_CONTENT_LIMIT],
        url=url or "N/A",
    )


def format_content_to_qa_prompt(title: Optional[str], content: Optional[str], url: Optional[str]) -> str:
    body = (content or "").strip()
    if not body:
        raise ValueError("Article content is empty; cannot convert to Q&A.")
    return CONTENT_TO_QA_PROMPT.format(title=title or "Untitled", url=url or "", content=body)
