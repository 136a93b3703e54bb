"""Recommendation templates keyed by score factor name."""

from dataclasses import dataclass

from analyzers.base import Priority, Recommendation, ScoreFactor


@dataclass(frozen=True)
class RecommendationTemplate:
    """Canned copy for a low-scoring factor."""

    factor: str
    title: str
    description: str
    impact_estimate: str
    auto_fixable: bool = False
    action_code: str | None = None

    def build(self, priority: Priority) -> Recommendation:
        return Recommendation(
            priority=priority,
            title=self.title,
            description=self.description,
            impact_estimate=self.impact_estimate,
            auto_fixable=self.auto_fixable,
            action_code=self.action_code,
        )


# Factors scoring below these bounds get a recommendation
CRITICAL_BELOW = 40
HIGH_BELOW = 60
MEDIUM_BELOW = 75


def priority_for_score(score: int) -> Priority | None:
    """Map a factor score to a priority; None means no action needed."""
    if score < CRITICAL_BELOW:
        return Priority.CRITICAL
    if score < HIGH_BELOW:
        return Priority.HIGH
    if score < MEDIUM_BELOW:
        return Priority.MEDIUM
    return None


# =============================================================================
# Shared factor templates
# =============================================================================

CORE_TEMPLATES = [
    RecommendationTemplate(
        factor="Entity Density",
        title="Add more named entities",
        description="Include specific names of people, organizations, products, and concepts. AI models prefer content with clear entity references.",
        impact_estimate="+10-15 points",
        auto_fixable=True,
        action_code="inject_entities",
    ),
    RecommendationTemplate(
        factor="Quotability",
        title="Improve content quotability",
        description="Break long paragraphs into shorter, quotable chunks (50-150 words). Add a 'Key Takeaways' section at the top.",
        impact_estimate="+10-20 points",
        auto_fixable=True,
        action_code="optimize_quotability",
    ),
    RecommendationTemplate(
        factor="Answer Structure",
        title="Add direct answer structure",
        description="Lead with a direct answer to the main query. Add FAQ sections, step-by-step instructions, and clear definitions.",
        impact_estimate="+15-25 points",
        auto_fixable=True,
        action_code="add_answer_structure",
    ),
    RecommendationTemplate(
        factor="Schema Markup",
        title="Add structured data",
        description="Implement FAQ schema, HowTo schema, or Article schema to help AI understand your content structure.",
        impact_estimate="+10-15 points",
        auto_fixable=True,
        action_code="add_schema",
    ),
    RecommendationTemplate(
        factor="Content Freshness",
        title="Update stale content",
        description="AI platforms prefer recent content. Update with new information, statistics, or examples, and expose the modified date.",
        impact_estimate="+5-15 points",
    ),
    RecommendationTemplate(
        factor="Authority Signals",
        title="Add expert attribution",
        description="Include author name with credentials, cite authoritative sources, and add expert quotes.",
        impact_estimate="+10-15 points",
        auto_fixable=True,
        action_code="add_attribution",
    ),
]

# =============================================================================
# Platform factor templates
# =============================================================================

PLATFORM_TEMPLATES = [
    RecommendationTemplate(
        factor="E-E-A-T Signals",
        title="Strengthen E-E-A-T signals",
        description="Show first-hand experience, cite experts and data, and cover the topic in depth so Google can trust the page.",
        impact_estimate="+10-20 points",
        auto_fixable=True,
        action_code="add_attribution",
    ),
    RecommendationTemplate(
        factor="Featured Snippet Ready",
        title="Format content for featured snippets",
        description="Open with a concise answer, use numbered lists or tables, and organize the page under three or more H2 sections.",
        impact_estimate="+5-15 points",
        auto_fixable=True,
        action_code="format_snippets",
    ),
    RecommendationTemplate(
        factor="Factual Density",
        title="Add verifiable facts and statistics",
        description="Support claims with numbers, dates, and cited sources that ChatGPT can reference directly.",
        impact_estimate="+10-15 points",
    ),
    RecommendationTemplate(
        factor="LLM Extractability",
        title="Make content easier to extract",
        description="Use clear headings, short paragraphs, bullet lists, and a summary section so answers can be lifted cleanly.",
        impact_estimate="+5-15 points",
        auto_fixable=True,
        action_code="improve_extractability",
    ),
    RecommendationTemplate(
        factor="Citation Worthiness",
        title="Add citation-worthy claims",
        description="Include specific, sourced statements and original data that an answer engine can cite verbatim.",
        impact_estimate="+10-20 points",
    ),
    RecommendationTemplate(
        factor="Comprehensive Coverage",
        title="Expand topic coverage",
        description="Cover the topic from multiple angles: definitions, how-to steps, statistics, expert views, and FAQs.",
        impact_estimate="+10-15 points",
    ),
    RecommendationTemplate(
        factor="Original Content",
        title="Include original data or research",
        description="Add surveys, case studies, or proprietary insights that are not available elsewhere.",
        impact_estimate="+10-20 points",
    ),
    RecommendationTemplate(
        factor="Schema & Structured Data",
        title="Add structured data markup",
        description="Add JSON-LD Schema.org markup such as Article, FAQPage, HowTo or Product, plus Open Graph tags.",
        impact_estimate="+15-25 points",
        auto_fixable=True,
        action_code="add_schema",
    ),
    RecommendationTemplate(
        factor="Entity Clarity",
        title="Clarify key entities",
        description="Name people, organizations, and products explicitly and consistently so they can be identified and linked.",
        impact_estimate="+5-15 points",
        auto_fixable=True,
        action_code="inject_entities",
    ),
    RecommendationTemplate(
        factor="Content Quality",
        title="Deepen content quality",
        description="Expand thin content and back it with statistics, expert attribution, takeaways, and step-by-step guidance.",
        impact_estimate="+10-15 points",
    ),
    RecommendationTemplate(
        factor="Semantic Clarity",
        title="Reduce ambiguous language",
        description="Replace vague pronouns with explicit names and make cause and effect explicit.",
        impact_estimate="+5-15 points",
        auto_fixable=True,
        action_code="clarify_pronouns",
    ),
    RecommendationTemplate(
        factor="Context Completeness",
        title="Add context in introduction",
        description="Define the topic and scope in the first paragraph, add a meta description, and close with a summary.",
        impact_estimate="+10-15 points",
        auto_fixable=True,
        action_code="add_context_intro",
    ),
    RecommendationTemplate(
        factor="Logical Structure",
        title="Improve logical flow",
        description="Use a consistent heading hierarchy and transition words so each section builds on the previous one.",
        impact_estimate="+5-15 points",
    ),
    RecommendationTemplate(
        factor="Entity Relationships",
        title="Explain entity relationships",
        description="Introduce each key entity with what it is and how it relates to the others.",
        impact_estimate="+5-10 points",
        auto_fixable=True,
        action_code="add_entity_definitions",
    ),
    RecommendationTemplate(
        factor="Definition Presence",
        title="Define key terms",
        description="Add clear definitions using phrases like 'X is defined as...' or 'X refers to...' before using a term.",
        impact_estimate="+5-10 points",
        auto_fixable=True,
        action_code="add_definitions",
    ),
    RecommendationTemplate(
        factor="Multimodal Content",
        title="Add images and video",
        description="Include relevant images with descriptive alt text and embed video, ideally from YouTube.",
        impact_estimate="+10-20 points",
    ),
    RecommendationTemplate(
        factor="Google Ecosystem",
        title="Connect Google ecosystem signals",
        description="Embed YouTube videos or Google Maps where relevant and use Schema.org structured data.",
        impact_estimate="+5-10 points",
    ),
]

ALL_TEMPLATES = CORE_TEMPLATES + PLATFORM_TEMPLATES

TEMPLATES_BY_FACTOR = {t.factor: t for t in ALL_TEMPLATES}


def template_for_factor(factor: ScoreFactor) -> RecommendationTemplate:
    """Look up canned copy, falling back to a generic template for unknown factors."""
    template = TEMPLATES_BY_FACTOR.get(factor.name)
    if template is not None:
        return template
    return RecommendationTemplate(
        factor=factor.name,
        title=f"Improve {factor.name.lower()}",
        description=factor.description,
        impact_estimate="+5-10 points",
    )


def recommendation_for_factor(factor: ScoreFactor) -> Recommendation | None:
    priority = priority_for_score(factor.score)
    if priority is None:
        return None
    return template_for_factor(factor).build(priority)
