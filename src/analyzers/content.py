"""Content input and structural feature value types."""

import enum
from dataclasses import dataclass, field
from datetime import datetime


class EntityType(str, enum.Enum):
    PERSON = "person"
    ORGANIZATION = "organization"
    PRODUCT = "product"
    CONCEPT = "concept"
    LOCATION = "location"
    EVENT = "event"
    TECHNOLOGY = "technology"
    OTHER = "other"


class SnippetKind(str, enum.Enum):
    DEFINITION = "definition"
    FACT = "fact"
    STATISTIC = "statistic"
    STEP = "step"
    ANSWER = "answer"
    KEY_POINT = "key_point"


class Rating(str, enum.Enum):
    """Ordinal rating used for heading and paragraph structure."""

    POOR = "poor"
    FAIR = "fair"
    GOOD = "good"


@dataclass(frozen=True)
class Heading:
    level: int  # 1-6
    text: str


@dataclass(frozen=True)
class ContentInput:
    """
    A page to analyze.

    Only `url`, `title` and `raw_text` are required. `word_count` falls back
    to whitespace tokenization of `raw_text`.
    """

    url: str
    title: str
    raw_text: str
    raw_html: str | None = None
    meta_description: str | None = None
    headings: tuple[Heading, ...] = ()
    published_at: datetime | None = None
    last_modified: datetime | None = None
    word_count: int | None = None
    existing_schema_blocks: tuple[dict, ...] = ()

    def __post_init__(self):
        # Accept lists, (level, text) pairs and dicts from callers
        headings = tuple(_coerce_heading(h) for h in self.headings or ())
        object.__setattr__(self, "headings", headings)
        object.__setattr__(
            self, "existing_schema_blocks", tuple(self.existing_schema_blocks or ())
        )
        object.__setattr__(self, "raw_text", self.raw_text or "")

    @property
    def effective_word_count(self) -> int:
        if self.word_count is not None:
            return max(0, self.word_count)
        return len(self.raw_text.split())


def _coerce_heading(value) -> Heading:
    if isinstance(value, Heading):
        return value
    if isinstance(value, dict):
        return Heading(level=int(value["level"]), text=str(value["text"]))
    level, text = value
    return Heading(level=int(level), text=str(text))


@dataclass(frozen=True)
class Entity:
    name: str
    type: EntityType
    mention_count: int
    context_quality_score: int  # 0-100


@dataclass(frozen=True)
class QuotableSnippet:
    text: str
    kind: SnippetKind
    char_offset: int
    quotability_score: int  # 0-100


@dataclass(frozen=True)
class ContentStructure:
    has_direct_answer: bool = False
    has_key_takeaways: bool = False
    has_faq_section: bool = False
    has_how_to_section: bool = False
    has_step_by_step: bool = False
    has_expert_attribution: bool = False
    has_statistics: bool = False
    has_definitions: bool = False
    heading_hierarchy: Rating = Rating.POOR
    paragraph_structure: Rating = Rating.POOR


@dataclass(frozen=True)
class SchemaPresence:
    """Structured-data markers found by scanning raw HTML."""

    has_json_ld: bool = False
    article: bool = False
    faq_page: bool = False
    how_to: bool = False
    product: bool = False
    organization: bool = False
    person: bool = False
    breadcrumb_list: bool = False
    open_graph: bool = False
    twitter_card: bool = False
    types_found: tuple[str, ...] = ()

    @property
    def other(self) -> bool:
        return self.product or self.organization or self.person or self.breadcrumb_list

    @property
    def any_schema(self) -> bool:
        return self.article or self.faq_page or self.how_to or self.other


@dataclass(frozen=True)
class StructuralFeatures:
    """Signals derived once per ContentInput and shared by every analyzer."""

    entities: tuple[Entity, ...]
    quotable_snippets: tuple[QuotableSnippet, ...]
    content_structure: ContentStructure
    schema_presence: SchemaPresence
    word_count: int
    paragraph_word_counts: tuple[int, ...] = ()
    external_link_count: int = 0
    has_credentials: bool = False
    quotability_score: int = 30
    lowered_text: str = field(default="", repr=False)

    @property
    def entity_density(self) -> float:
        """Entities per 1000 words."""
        return len(self.entities) / max(self.word_count, 1) * 1000

    @property
    def avg_paragraph_words(self) -> float:
        if not self.paragraph_word_counts:
            return 0.0
        return sum(self.paragraph_word_counts) / len(self.paragraph_word_counts)
