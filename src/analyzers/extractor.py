"""
Structural feature extraction.

Turns a ContentInput into the shared StructuralFeatures consumed by every
platform analyzer. Everything here is a pure string heuristic: entity
recognition is capitalized-phrase matching and schema detection is a
substring scan, which is all presence detection needs.
"""

import logging
import re
from collections import Counter

from analyzers.base import round_score
from analyzers.content import (
    ContentInput,
    ContentStructure,
    Entity,
    EntityType,
    Heading,
    QuotableSnippet,
    Rating,
    SchemaPresence,
    SnippetKind,
    StructuralFeatures,
)
from analyzers.urls import domain_matches

logger = logging.getLogger(__name__)

MAX_ENTITIES = 50
MAX_SNIPPETS = 20
MIN_SNIPPET_SCORE = 60

ENTITY_PATTERN = re.compile(r"[A-Z][a-z]+(?:\s+[A-Z][a-z]+)*")
SENTENCE_PATTERN = re.compile(r"[^.!?]+([.!?]*)")
PARAGRAPH_SPLIT = re.compile(r"\n\s*\n")
STATISTIC_PATTERN = re.compile(
    r"\d+%|\d+\s*(?:million|billion|thousand)|\$\d+", re.IGNORECASE
)
STEP_FLAG_PATTERN = re.compile(r"step\s*[1-9]|first,.*second,|(?:^|\s)1\.\s")
STEP_SNIPPET_PATTERN = re.compile(r"step\s*\d|first,|second,", re.IGNORECASE)
KEY_POINT_PATTERN = re.compile(r"\b(?:key|important|main)\b", re.IGNORECASE)
AUTHORITY_PATTERN = re.compile(r"according to|expert|research|study", re.IGNORECASE)
CREDENTIAL_PATTERN = re.compile(
    r"\b(?:ph\.?d|m\.?d|professor|ceo|founder)\b|\bdr\.|years of experience",
    re.IGNORECASE,
)
EXTERNAL_LINK_PATTERN = re.compile(r"""href\s*=\s*["'](https?://[^"']+)""", re.IGNORECASE)

KEY_TAKEAWAY_MARKERS = ("key takeaway", "key point", "tl;dr", "in summary", "summary", "bottom line")
FAQ_MARKERS = ("faq", "frequently asked")
HOW_TO_MARKERS = ("how to", "step by step", "step 1")
EXPERT_MARKERS = ("according to", "expert", "research", "study shows", "dr.", "phd")
DEFINITION_MARKERS = ("is defined as", "refers to", "means that")

ORGANIZATION_WORDS = {"inc", "corp", "corporation", "llc", "ltd", "company", "group", "foundation"}
PERSON_WORDS = {"dr", "mr", "mrs", "ms", "prof", "professor"}
TECHNOLOGY_WORDS = {"api", "software", "cloud", "platform", "python", "javascript", "database"}
LOCATION_WORDS = {"city", "county", "state", "river", "street", "mountain", "island", "republic"}
EVENT_WORDS = {"conference", "summit", "festival", "war", "olympics", "championship"}
PRODUCT_WORDS = {"pro", "plus", "max", "edition", "app"}

DEFAULT_DIRECT_ANSWER_WINDOW = (100, 500)

SCHEMA_TYPES = {
    "article": ("Article", "NewsArticle", "BlogPosting"),
    "faq_page": ("FAQPage",),
    "how_to": ("HowTo",),
    "product": ("Product",),
    "organization": ("Organization",),
    "person": ("Person",),
    "breadcrumb_list": ("BreadcrumbList",),
}


# =============================================================================
# Text helpers (shared with platform analyzers)
# =============================================================================


def split_paragraphs(text: str) -> list[str]:
    """Split text on blank lines, dropping empty paragraphs."""
    return [p for p in PARAGRAPH_SPLIT.split(text or "") if p.strip()]


def first_paragraph(text: str) -> str:
    return PARAGRAPH_SPLIT.split(text or "", maxsplit=1)[0]


def has_direct_answer(text: str, min_chars: int, max_chars: int | None = None) -> bool:
    """True if the first paragraph length falls within the given window."""
    length = len(first_paragraph(text))
    if length < min_chars:
        return False
    return max_chars is None or length <= max_chars


def rate_heading_count(headings: tuple[Heading, ...], good: int = 5, fair: int = 2) -> Rating:
    if len(headings) >= good:
        return Rating.GOOD
    if len(headings) >= fair:
        return Rating.FAIR
    return Rating.POOR


def rate_paragraph_length(
    word_counts: tuple[int, ...],
    good: tuple[int, int] = (40, 150),
    fair: tuple[int, int] = (30, 200),
) -> Rating:
    if not word_counts:
        return Rating.POOR
    avg = sum(word_counts) / len(word_counts)
    if good[0] <= avg <= good[1]:
        return Rating.GOOD
    if fair[0] <= avg <= fair[1]:
        return Rating.FAIR
    return Rating.POOR


def rate_paragraph_count(text: str, good: int, fair: int) -> Rating:
    count = len(split_paragraphs(text))
    if count >= good:
        return Rating.GOOD
    if count >= fair:
        return Rating.FAIR
    return Rating.POOR


def count_occurrences(lowered_text: str, phrases: tuple[str, ...]) -> int:
    return sum(lowered_text.count(p) for p in phrases)


# =============================================================================
# Extraction
# =============================================================================


def extract(content: ContentInput) -> StructuralFeatures:
    """
    Derive structural features from a ContentInput.

    Never raises for well-typed input: missing optional fields produce
    neutral defaults.
    """
    text = content.raw_text
    lowered = text.lower()
    word_count = content.effective_word_count
    paragraph_word_counts = tuple(len(p.split()) for p in split_paragraphs(text))

    entities = extract_entities(text)
    snippets = extract_quotable_snippets(text)
    structure = analyze_structure(content, lowered, paragraph_word_counts)
    schema = detect_schema(content.raw_html or "", content.existing_schema_blocks)

    return StructuralFeatures(
        entities=entities,
        quotable_snippets=snippets,
        content_structure=structure,
        schema_presence=schema,
        word_count=word_count,
        paragraph_word_counts=paragraph_word_counts,
        external_link_count=count_external_links(content.raw_html or "", content.url),
        has_credentials=bool(CREDENTIAL_PATTERN.search(text)),
        quotability_score=score_quotability(snippets, word_count),
        lowered_text=lowered,
    )


def extract_entities(text: str) -> tuple[Entity, ...]:
    """
    Approximate named entities via capitalized phrases.

    Deduplicated case-insensitively, keeping the first-seen casing, ranked by
    mention count (first appearance breaks ties) and capped at MAX_ENTITIES.
    """
    counts: Counter[str] = Counter()
    display: dict[str, str] = {}

    for match in ENTITY_PATTERN.finditer(text):
        phrase = match.group(0)
        if len(phrase) <= 3:
            continue
        key = phrase.lower()
        counts[key] += 1
        display.setdefault(key, phrase)

    # Counter preserves insertion order, and sorted() is stable
    ranked = sorted(counts.items(), key=lambda item: -item[1])[:MAX_ENTITIES]
    lowered = text.lower()

    return tuple(
        Entity(
            name=display[key],
            type=infer_entity_type(display[key]),
            mention_count=mentions,
            context_quality_score=assess_context_quality(key, lowered),
        )
        for key, mentions in ranked
    )


def infer_entity_type(name: str) -> EntityType:
    """Keyword heuristic; intentionally low fidelity."""
    words = set(name.lower().split())
    if words & ORGANIZATION_WORDS:
        return EntityType.ORGANIZATION
    if words & PERSON_WORDS:
        return EntityType.PERSON
    if words & TECHNOLOGY_WORDS:
        return EntityType.TECHNOLOGY
    if words & LOCATION_WORDS:
        return EntityType.LOCATION
    if words & EVENT_WORDS:
        return EntityType.EVENT
    if words & PRODUCT_WORDS:
        return EntityType.PRODUCT
    return EntityType.OTHER


def assess_context_quality(name_lower: str, lowered_text: str) -> int:
    if (
        f"{name_lower} is" in lowered_text
        or f"{name_lower}, which" in lowered_text
        or f"{name_lower} refers" in lowered_text
    ):
        return 80

    mentions = lowered_text.count(name_lower)
    if mentions >= 5:
        return 70
    if mentions >= 3:
        return 60
    return 50


def extract_quotable_snippets(text: str) -> tuple[QuotableSnippet, ...]:
    """Sentences that could be lifted verbatim as an answer, in document order."""
    snippets = []

    for match in SENTENCE_PATTERN.finditer(text):
        raw = match.group(0)
        terminator = match.group(1)
        sentence = raw[: len(raw) - len(terminator)]
        stripped = sentence.strip()
        if len(stripped) < 20:
            continue

        words = len(stripped.split())
        if words < 10 or words > 50:
            continue

        kind = classify_snippet(stripped, is_question="?" in terminator)
        score = score_snippet(stripped, kind)
        if score < MIN_SNIPPET_SCORE:
            continue

        offset = match.start() + (len(sentence) - len(sentence.lstrip()))
        snippets.append(
            QuotableSnippet(
                text=stripped,
                kind=kind,
                char_offset=offset,
                quotability_score=score,
            )
        )
        if len(snippets) >= MAX_SNIPPETS:
            break

    return tuple(snippets)


def classify_snippet(sentence: str, is_question: bool = False) -> SnippetKind:
    lower = sentence.lower()

    if STATISTIC_PATTERN.search(sentence):
        return SnippetKind.STATISTIC
    if "is defined as" in lower or "refers to" in lower:
        return SnippetKind.DEFINITION
    if STEP_SNIPPET_PATTERN.search(sentence):
        return SnippetKind.STEP
    if KEY_POINT_PATTERN.search(sentence):
        return SnippetKind.KEY_POINT
    if is_question or "?" in sentence:
        return SnippetKind.ANSWER
    return SnippetKind.FACT


SNIPPET_KIND_BONUS = {
    SnippetKind.STATISTIC: 20,
    SnippetKind.DEFINITION: 20,
    SnippetKind.STEP: 15,
    SnippetKind.KEY_POINT: 15,
    SnippetKind.ANSWER: 10,
    SnippetKind.FACT: 5,
}


def score_snippet(sentence: str, kind: SnippetKind) -> int:
    score = 50 + SNIPPET_KIND_BONUS[kind]

    words = len(sentence.split())
    if 15 <= words <= 30:
        score += 15
    elif 10 <= words <= 40:
        score += 10

    if re.search(r"\d", sentence):
        score += 10
    if AUTHORITY_PATTERN.search(sentence):
        score += 10

    return min(100, score)


def score_quotability(snippets: tuple[QuotableSnippet, ...], word_count: int) -> int:
    """Page-level quotability; 30 when nothing is quotable."""
    if not snippets:
        return 30

    avg = sum(s.quotability_score for s in snippets) / len(snippets)
    density = len(snippets) / max(word_count, 1) * 1000

    if 5 <= density <= 15:
        density_score = 100.0
    elif 3 <= density < 5:
        density_score = 70.0
    elif density > 15:
        density_score = 80.0
    else:
        density_score = density * 20

    return round_score(avg * 0.6 + density_score * 0.4)


def analyze_structure(
    content: ContentInput,
    lowered: str,
    paragraph_word_counts: tuple[int, ...],
) -> ContentStructure:
    """Boolean content flags plus ordinal structure ratings."""
    min_chars, max_chars = DEFAULT_DIRECT_ANSWER_WINDOW

    return ContentStructure(
        has_direct_answer=has_direct_answer(content.raw_text, min_chars, max_chars),
        has_key_takeaways=any(m in lowered for m in KEY_TAKEAWAY_MARKERS),
        has_faq_section=(
            any(m in lowered for m in FAQ_MARKERS)
            or any("question" in h.text.lower() for h in content.headings)
        ),
        has_how_to_section=any(m in lowered for m in HOW_TO_MARKERS),
        has_step_by_step=bool(STEP_FLAG_PATTERN.search(lowered)),
        has_expert_attribution=any(m in lowered for m in EXPERT_MARKERS),
        has_statistics=bool(STATISTIC_PATTERN.search(lowered)),
        has_definitions=any(m in lowered for m in DEFINITION_MARKERS),
        heading_hierarchy=rate_heading_count(content.headings),
        paragraph_structure=rate_paragraph_length(paragraph_word_counts),
    )


def detect_schema(html: str, schema_blocks: tuple[dict, ...] = ()) -> SchemaPresence:
    """
    Detect structured-data markers by substring scan.

    Also honors `@type` values of schema blocks already supplied by the caller.
    """
    lower = html.lower()
    declared = _declared_types(schema_blocks)

    found = []
    flags = {}
    for flag, type_names in SCHEMA_TYPES.items():
        present = False
        for type_name in type_names:
            pattern = rf'"@type"\s*:\s*"{type_name.lower()}"'
            if re.search(pattern, lower) or type_name.lower() in declared:
                present = True
                found.append(type_name)
        flags[flag] = present

    return SchemaPresence(
        has_json_ld="application/ld+json" in lower or bool(schema_blocks),
        open_graph='property="og:' in lower,
        twitter_card='name="twitter:' in lower,
        types_found=tuple(found),
        **flags,
    )


def _declared_types(schema_blocks: tuple[dict, ...]) -> set[str]:
    types: set[str] = set()
    stack = list(schema_blocks)
    while stack:
        block = stack.pop()
        if isinstance(block, list):
            stack.extend(block)
            continue
        if not isinstance(block, dict):
            continue
        value = block.get("@type")
        if isinstance(value, str):
            types.add(value.lower())
        elif isinstance(value, list):
            types.update(str(v).lower() for v in value)
        if "@graph" in block:
            stack.append(block["@graph"])
    return types


def count_external_links(html: str, page_url: str = "") -> int:
    """Absolute links in the HTML that point away from the page's own domain."""
    count = 0
    for match in EXTERNAL_LINK_PATTERN.finditer(html):
        href = match.group(1)
        if page_url and domain_matches(href, page_url):
            continue
        count += 1
    return count
