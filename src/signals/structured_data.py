"""Structured data detection: JSON-LD blocks plus extruct microdata / RDFa."""
from __future__ import annotations

import json
import logging
from typing import Any

import extruct

from src.models.content import SchemaEntity, StructuredDataSignals

logger = logging.getLogger(__name__)

AI_FRIENDLY_TYPES = (
    "FAQPage",
    "QAPage",
    "HowTo",
    "Article",
    "NewsArticle",
    "BlogPosting",
    "TechArticle",
    "SpeakableSpecification",
)
CONVERSATIONAL_TYPES = frozenset({"Question", "Answer", "HowToStep"})


def _as_type_list(value: Any) -> list[str]:
    if isinstance(value, str):
        return [value]
    if isinstance(value, list):
        return [item for item in value if isinstance(item, str)]
    return []


def collect_types(node: Any, found: list[str] | None = None) -> list[str]:
    """Collect every @type in document order, recursing into nested objects and @graph."""
    if found is None:
        found = []
    if isinstance(node, dict):
        for schema_type in _as_type_list(node.get("@type")):
            if schema_type not in found:
                found.append(schema_type)
        for value in node.values():
            if isinstance(value, (dict, list)):
                collect_types(value, found)
    elif isinstance(node, list):
        for item in node:
            collect_types(item, found)
    return found


def _count_types(node: Any, wanted: frozenset[str]) -> int:
    count = 0
    if isinstance(node, dict):
        count += sum(1 for t in _as_type_list(node.get("@type")) if t in wanted)
        for value in node.values():
            if isinstance(value, (dict, list)):
                count += _count_types(value, wanted)
    elif isinstance(node, list):
        count += sum(_count_types(item, wanted) for item in node)
    return count


def _top_level_items(data: Any) -> list[dict]:
    items = data if isinstance(data, list) else [data]
    expanded: list[dict] = []
    for item in items:
        if not isinstance(item, dict):
            continue
        graph = item.get("@graph")
        if isinstance(graph, list):
            expanded.extend(entry for entry in graph if isinstance(entry, dict))
        else:
            expanded.append(item)
    return expanded


def _entity(item: dict, source: str) -> SchemaEntity | None:
    types = _as_type_list(item.get("@type"))
    if not types:
        return None
    properties = sorted(key for key in item if not key.startswith("@"))
    return SchemaEntity(type=types[0], properties=properties, source=source)


def _validate_block(data: Any, index: int) -> list[str]:
    """Basic validation: each JSON-LD document needs @context and @type."""
    documents = data if isinstance(data, list) else [data]
    errors: list[str] = []
    has_context = all(isinstance(doc, dict) and doc.get("@context") for doc in documents) and bool(documents)
    has_type = bool(documents) and all(
        isinstance(doc, dict)
        and (doc.get("@type") or any(isinstance(entry, dict) and entry.get("@type") for entry in doc.get("@graph") or []))
        for doc in documents
    )
    if not has_context:
        errors.append(f"Schema {index}: Missing @context")
    if not has_type:
        errors.append(f"Schema {index}: Missing @type")
    return errors


def _uses_schema_org(data: Any) -> bool:
    documents = data if isinstance(data, list) else [data]
    for doc in documents:
        if not isinstance(doc, dict):
            continue
        context = doc.get("@context")
        if isinstance(context, str) and "schema.org" in context:
            return True
        if isinstance(context, (list, dict)) and "schema.org" in json.dumps(context):
            return True
    return False


def _extract_markup_items(html: str, url: str) -> tuple[list[dict], list[dict]]:
    """Microdata and RDFa items via extruct; broken markup degrades to nothing."""
    if not html or not html.strip():
        return [], []
    try:
        data = extruct.extract(
            html,
            base_url=url or None,
            syntaxes=["microdata", "rdfa"],
            uniform=True,
        )
    except Exception as exc:
        logger.debug("extruct could not parse markup: %s", exc)
        return [], []
    microdata = [item for item in data.get("microdata", []) if isinstance(item, dict)]
    rdfa = [
        item for item in data.get("rdfa", [])
        if isinstance(item, dict) and _as_type_list(item.get("@type"))
    ]
    return microdata, rdfa


def detect_structured_data(html: str, url: str, schema_blocks: list[str]) -> StructuredDataSignals:
    """Parse JSON-LD blocks one by one and merge in microdata / RDFa types.

    A malformed block is recorded as "Schema N: Invalid JSON syntax" and
    skipped; the remaining blocks are still analysed.
    """
    schema_types: list[str] = []
    validation_errors: list[str] = []
    entities: list[SchemaEntity] = []
    conversational = 0
    schema_org_context = False
    speakable = False

    for index, block in enumerate(schema_blocks, start=1):
        try:
            data = json.loads(block)
        except (json.JSONDecodeError, RecursionError):
            logger.debug("Malformed JSON-LD block %d", index)
            validation_errors.append(f"Schema {index}: Invalid JSON syntax")
            continue

        try:
            block_types = collect_types(data)
        except RecursionError:
            logger.debug("JSON-LD block %d is nested too deeply", index)
            validation_errors.append(f"Schema {index}: Nesting too deep")
            continue
        schema_types.extend(t for t in block_types if t not in schema_types)
        validation_errors.extend(_validate_block(data, index))
        conversational += _count_types(data, CONVERSATIONAL_TYPES)
        schema_org_context = schema_org_context or _uses_schema_org(data)
        speakable = speakable or '"speakable"' in block.lower()
        for item in _top_level_items(data):
            entity = _entity(item, "json-ld")
            if entity is not None:
                entities.append(entity)

    microdata, rdfa = _extract_markup_items(html, url)
    for items, source in ((microdata, "microdata"), (rdfa, "rdfa")):
        for item in items:
            collect_types(item, schema_types)
            conversational += _count_types(item, CONVERSATIONAL_TYPES)
            entity = _entity(item, source)
            if entity is not None:
                entities.append(entity)

    ai_friendly = [t for t in AI_FRIENDLY_TYPES if t in schema_types]
    if speakable and "SpeakableSpecification" not in ai_friendly:
        ai_friendly.append("Speakable")

    return StructuredDataSignals(
        json_ld_count=len(schema_blocks),
        microdata_count=len(microdata),
        rdfa_count=len(rdfa),
        schema_types=schema_types,
        validation_errors=validation_errors,
        ai_friendly_schemas=ai_friendly,
        conversational_elements=conversational,
        has_schema_org_context=schema_org_context,
        entities=entities,
    )
