"""Named entity detection with spaCy, falling back to pattern matching."""
from __future__ import annotations

import logging
import re
import threading

import spacy

from src.config.settings import settings
from src.models.content import EntitySignals

logger = logging.getLogger(__name__)

# Thread-safe NLP model loading
_NLP = None
_NLP_LOCK = threading.Lock()
_NLP_AVAILABLE = True

_LABEL_BUCKETS = {
    "PERSON": "persons",
    "PER": "persons",
    "ORG": "organizations",
    "GPE": "locations",
    "LOC": "locations",
    "FAC": "locations",
    "PRODUCT": "brands",
}

# English fallback patterns
_PERSON_PATTERN = re.compile(r"\b(?:Dr|Mr|Mrs|Ms|Prof)\.?\s+[A-Z][a-z]+(?:\s+[A-Z][a-z]+)?")
_ORG_PATTERN = re.compile(
    r"\b(?:[A-Z][\w&-]*\s+)+(?:Inc|Corp|Corporation|LLC|Ltd|Company|Group|University|"
    r"Institute|Foundation|Association|Agency|Bank|Hospital)\b\.?"
)
_LOCATION_PATTERN = re.compile(r"\b(?:in|at|from|near)\s+([A-Z][a-z]+(?:,?\s+[A-Z][a-z]+)?)")
_BRAND_PATTERN = re.compile(r"\b[A-Z][a-z]+[A-Z][A-Za-z]*\b|\b\w+(?:™|®)")

# CJK patterns
_CJK_ORG_PATTERNS = [
    re.compile(r"[\u4e00-\u9fff]+(?:公司|集團|銀行|大學|學院|醫院|政府|委員會|協會|基金會|研究所|中心)"),
    re.compile(r"[\u4e00-\u9fff]+(?:会社|銀行|大学|研究所)"),  # Japanese
]
_CJK_LOCATION_PATTERNS = [
    re.compile(r"[\u4e00-\u9fff]+(?:市|省|縣|區|國|州|島)"),
    re.compile(r"[\u4e00-\u9fff]+(?:市|県|区|国)"),  # Japanese
]


def detect_language(text: str) -> str:
    """Detect primary language of text based on character patterns.

    Returns:
        Language code: 'zh', 'ja', 'ko' or 'en'
    """
    if not text:
        return "en"

    cjk_count = 0
    latin_count = 0
    for char in text[:1000]:  # Sample first 1000 chars
        code = ord(char)
        # CJK Unified Ideographs
        if 0x4E00 <= code <= 0x9FFF:
            cjk_count += 1
        # Hiragana/Katakana (Japanese specific)
        elif 0x3040 <= code <= 0x30FF:
            return "ja"
        # Hangul (Korean specific)
        elif 0xAC00 <= code <= 0xD7AF:
            return "ko"
        elif char.isascii() and char.isalpha():
            latin_count += 1

    total = cjk_count + latin_count
    if total and cjk_count / total > 0.3:
        return "zh"
    return "en"


def _load_spacy_model():
    """Load spaCy model with thread safety and fallback support.

    Tries models in order from settings until one loads successfully.
    Returns None if no model can be loaded.
    """
    global _NLP, _NLP_AVAILABLE

    with _NLP_LOCK:
        if _NLP is not None:
            return _NLP

        if not _NLP_AVAILABLE:
            return None

        # Try each model in preference order
        for model_name in settings.nlp.spacy_models:
            try:
                _NLP = spacy.load(model_name)
                logger.debug("Loaded spaCy model %s", model_name)
                return _NLP
            except OSError:
                continue

        # No model loaded - mark as unavailable to avoid repeated attempts
        _NLP_AVAILABLE = False
        logger.info("No spaCy model installed (%s); using pattern entities", ", ".join(settings.nlp.spacy_models))
        return None


def _add(buckets: dict[str, list[str]], bucket: str, text: str) -> None:
    text = " ".join(text.split()).strip(" .,;:")
    if len(text) > 1 and text not in buckets[bucket]:
        buckets[bucket].append(text)


def _pattern_entities(text: str, buckets: dict[str, list[str]], language: str) -> None:
    if language in ("zh", "ja", "ko"):
        for pattern in _CJK_ORG_PATTERNS:
            for match in pattern.finditer(text):
                _add(buckets, "organizations", match.group())
        for pattern in _CJK_LOCATION_PATTERNS:
            for match in pattern.finditer(text):
                _add(buckets, "locations", match.group())
        return

    for match in _PERSON_PATTERN.finditer(text):
        _add(buckets, "persons", match.group())
    for match in _ORG_PATTERN.finditer(text):
        _add(buckets, "organizations", match.group())
    for match in _LOCATION_PATTERN.finditer(text):
        _add(buckets, "locations", match.group(1))
    for match in _BRAND_PATTERN.finditer(text):
        _add(buckets, "brands", match.group())


def detect_entities(paragraphs: list[str]) -> tuple[EntitySignals, str]:
    """Extract persons, organizations, locations and brands.

    Returns:
        (EntitySignals, backend) where backend is "spacy" or "patterns"
    """
    buckets: dict[str, list[str]] = {"persons": [], "organizations": [], "locations": [], "brands": []}
    text = " ".join(paragraphs)
    if not text:
        return EntitySignals(), "patterns"

    language = detect_language(text)
    use_cjk_fallback = settings.nlp.enable_cjk_fallback and language in ("zh", "ja", "ko")
    nlp = None if use_cjk_fallback else _load_spacy_model()

    if nlp is not None:
        for paragraph in paragraphs:
            doc = nlp(paragraph)
            for ent in doc.ents:
                if ent.label_ in settings.nlp.entity_labels and ent.label_ in _LABEL_BUCKETS:
                    _add(buckets, _LABEL_BUCKETS[ent.label_], ent.text)
        backend = "spacy"
    else:
        _pattern_entities(text, buckets, language)
        backend = "patterns"

    limit = settings.nlp.max_entities
    return EntitySignals(**{name: values[:limit] for name, values in buckets.items()}), backend
