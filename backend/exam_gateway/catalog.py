"""
Reading ability catalog.

A closed set of reading-comprehension dimensions. Generated questions are
tagged with one of these keys, and weakness analysis reports against the same
table, so both sides share the ``AbilityKey`` enum.
"""

from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Iterator, Mapping, Optional, Tuple


class AbilityKey(str, Enum):
    VOCAB = "vocab"
    GRAMMAR = "grammar"
    MAIN_IDEA = "mainIdea"
    DETAIL = "detail"
    INFERENCE = "inference"
    REFERENCE = "reference"
    PURPOSE = "purpose"
    TONE = "tone"
    STRUCTURE = "structure"
    CONTEXT_CLUE = "contextClue"
    SCANNING = "scanning"
    PARAPHRASE = "paraphrase"

    @classmethod
    def parse(cls, value: object) -> Optional["AbilityKey"]:
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value))
        except ValueError:
            return None


@dataclass(frozen=True)
class AbilityCategory:
    key: AbilityKey
    tag: str
    title: str
    description: str
    suggestion: str
    skills: str


class AbilityCatalog:
    """Ordered, read-only lookup table of ability categories."""

    def __init__(self, categories: Tuple[AbilityCategory, ...]) -> None:
        keys = [c.key for c in categories]
        if len(set(keys)) != len(keys):
            raise ValueError("duplicate ability keys in catalog")
        self._categories = tuple(categories)
        self._by_key: Mapping[AbilityKey, AbilityCategory] = MappingProxyType({c.key: c for c in categories})

    def __iter__(self) -> Iterator[AbilityCategory]:
        return iter(self._categories)

    def __len__(self) -> int:
        return len(self._categories)

    def get(self, key: object) -> Optional[AbilityCategory]:
        parsed = AbilityKey.parse(key)
        if parsed is None:
            return None
        return self._by_key.get(parsed)

    def keys(self) -> Tuple[AbilityKey, ...]:
        return tuple(c.key for c in self._categories)


CATALOG = AbilityCatalog((
    AbilityCategory(
        key=AbilityKey.VOCAB,
        tag="📖 Vocabulary",
        title="Word knowledge",
        description="Recognising the meaning and usage of common and exam-specific words.",
        suggestion="Keep a themed word list and review it with spaced repetition; learn collocations, not single words.",
        skills="word meaning, collocations, word families",
    ),
    AbilityCategory(
        key=AbilityKey.GRAMMAR,
        tag="🧩 Grammar",
        title="Sentence structure",
        description="Choosing forms that fit the tense, agreement and structure of the sentence.",
        suggestion="Before choosing, identify the subject, the verb and the time frame of the sentence.",
        skills="tenses, agreement, parts of speech",
    ),
    AbilityCategory(
        key=AbilityKey.MAIN_IDEA,
        tag="🎯 Main idea",
        title="Identifying the main idea",
        description="Grasping what a passage is mostly about rather than its individual details.",
        suggestion="After each paragraph, summarise it in one sentence; the title test helps with whole passages.",
        skills="skimming, summarising, topic sentences",
    ),
    AbilityCategory(
        key=AbilityKey.DETAIL,
        tag="🔍 Detail",
        title="Locating details",
        description="Finding specific facts such as names, dates, numbers and conditions.",
        suggestion="Underline the key words of the question and match them against the passage before reading the options.",
        skills="close reading, fact matching",
    ),
    AbilityCategory(
        key=AbilityKey.INFERENCE,
        tag="💡 Inference",
        title="Drawing inferences",
        description="Understanding what the writer implies but does not state directly.",
        suggestion="Ask which option must be true given the text, and reject options that need outside assumptions.",
        skills="implication, logical reasoning",
    ),
    AbilityCategory(
        key=AbilityKey.REFERENCE,
        tag="🔗 Reference",
        title="Tracking references",
        description="Resolving what pronouns and referring expressions point back to.",
        suggestion="When you meet 'it', 'this' or 'they', stop and name the noun it replaces.",
        skills="pronoun resolution, cohesion",
    ),
    AbilityCategory(
        key=AbilityKey.PURPOSE,
        tag="📝 Purpose",
        title="Author's purpose",
        description="Recognising why a text or a paragraph was written.",
        suggestion="Classify each text as informing, persuading, requesting or announcing before answering.",
        skills="genre awareness, intent",
    ),
    AbilityCategory(
        key=AbilityKey.TONE,
        tag="🎭 Tone",
        title="Tone and attitude",
        description="Sensing the writer's attitude from word choice.",
        suggestion="Collect positive and negative signal words while reading and weigh them at the end.",
        skills="attitude, connotation",
    ),
    AbilityCategory(
        key=AbilityKey.STRUCTURE,
        tag="🏗️ Structure",
        title="Text organisation",
        description="Following how ideas are ordered and where a sentence best fits.",
        suggestion="Watch transition words; they show whether the next sentence contrasts, adds or concludes.",
        skills="sequencing, sentence insertion, transitions",
    ),
    AbilityCategory(
        key=AbilityKey.CONTEXT_CLUE,
        tag="🧭 Context clues",
        title="Meaning from context",
        description="Working out unfamiliar words from the surrounding sentences.",
        suggestion="Cover the word, read the sentence around it and predict a meaning before looking at the options.",
        skills="vocabulary in context, guessing strategies",
    ),
    AbilityCategory(
        key=AbilityKey.SCANNING,
        tag="⏱️ Scanning",
        title="Scanning under time pressure",
        description="Finding information quickly in schedules, forms and multi-part texts.",
        suggestion="Practise timed reading with tables and e-mails; read the question first, then scan.",
        skills="speed reading, multi-text navigation",
    ),
    AbilityCategory(
        key=AbilityKey.PARAPHRASE,
        tag="🔄 Paraphrase",
        title="Recognising paraphrase",
        description="Matching options that restate the passage in different words.",
        suggestion="Rewrite key sentences in your own words; correct options rarely reuse the passage's exact wording.",
        skills="synonyms, restatement",
    ),
))
