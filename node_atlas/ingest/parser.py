"""Node definition parser.

Extracts catalog fields from the TypeScript source of an n8n node
(``*.node.ts``) with regular expressions. Parsing is best-effort: missing
optional fields get defaults, and only content that does not look like a
node description at all is rejected with MalformedEntityError.

The rest of the package only depends on ``parse_entity_record``.
"""
import re
from dataclasses import dataclass
from typing import Optional

from node_atlas.catalog.errors import MalformedEntityError
from node_atlas.models.catalog import CatalogEntity

NODE_TYPE_PREFIX = "n8n-nodes-base."
DOCS_BASE_URL = "https://docs.n8n.io/integrations/builtin/app-nodes"

_QUOTED = r"""['"`]([^'"`]+)['"`]"""

_RE_DISPLAY_NAME = re.compile(r"displayName:\s*" + _QUOTED)
_RE_NAME = re.compile(r"\bname:\s*" + _QUOTED)
_RE_DESCRIPTION = re.compile(r"\bdescription:\s*" + _QUOTED)
_RE_VERSION = re.compile(r"\bversion:\s*\[?\s*(\d+(?:\.\d+)?)")
_RE_ICON = re.compile(r"\bicon:\s*" + _QUOTED)
_RE_GROUP = re.compile(r"\bgroup:\s*\[\s*" + _QUOTED)
_RE_CREDENTIALS_BLOCK = re.compile(r"\bcredentials:\s*\[([\s\S]*?)\]")
_RE_OPTION = re.compile(r"\bname:\s*" + _QUOTED + r",\s*value:\s*" + _QUOTED)


@dataclass(frozen=True)
class RawNodeRecord:
    """One node definition as fetched from the remote source."""

    directory: str
    file_name: str
    content: str
    source_url: Optional[str] = None


# =============================================================================
# CLASSIFICATION TABLES
# =============================================================================

CORE_NODES = {
    "code", "function", "functionitem", "httprequest", "webhook", "set",
    "filter", "if", "switch", "merge", "sort", "splitinbatches", "wait",
    "datetime", "crypto", "xml", "html", "compression", "ssh", "ftp",
    "aggregate", "limit", "removeduplicates", "summarize", "itemlists",
    "renamekeys", "stopanderror", "noop", "executeworkflow",
}

AI_NODES = (
    "openai", "anthropic", "mistral", "cohere", "huggingface", "ollama",
    "gemini", "perplexity", "langchain", "pinecone", "qdrant", "weaviate",
)

DATABASE_NODES = ("mysql", "postgres", "mongodb", "redis", "sqlite", "influxdb",
                  "elasticsearch", "microsoftsql", "snowflake", "supabase")
CLOUD_NODES = ("aws", "googlecloud", "azure", "dropbox", "box", "s3", "googledrive")
COMMUNICATION_NODES = ("slack", "discord", "telegram", "teams", "email", "gmail",
                       "outlook", "mattermost", "twilio", "zoom")

# directory fragment -> subcategory, first match wins
SUBCATEGORY_HINTS: list[tuple[str, str]] = [
    ("openai", "Language Models"),
    ("anthropic", "Language Models"),
    ("mistral", "Language Models"),
    ("pinecone", "Vector Databases"),
    ("qdrant", "Vector Databases"),
    ("postgres", "SQL"),
    ("mysql", "SQL"),
    ("microsoftsql", "SQL"),
    ("snowflake", "SQL"),
    ("mongodb", "NoSQL"),
    ("redis", "Cache"),
    ("gmail", "Email"),
    ("outlook", "Email"),
    ("email", "Email"),
    ("slack", "Chat"),
    ("discord", "Chat"),
    ("telegram", "Chat"),
    ("teams", "Chat"),
    ("lambda", "Compute"),
    ("sns", "Messaging"),
    ("sqs", "Messaging"),
    ("s3", "Storage"),
    ("drive", "Storage"),
    ("dropbox", "Storage"),
]

AI_CATEGORIES = {"ai", "artificial intelligence", "langchain", "ai agents"}
AI_SUBCATEGORIES = {
    "language models", "chat models", "embeddings", "vector databases",
    "vector stores", "image generation", "agents", "memory", "retrievers",
}


def derive_ai_flag(
    identifier: str,
    category: str,
    subcategory: Optional[str] = None,
) -> bool:
    """Decide once whether an entity belongs to the AI partition."""
    if "langchain" in identifier.lower():
        return True
    if category.lower() in AI_CATEGORIES:
        return True
    if subcategory:
        if subcategory.lower() in AI_SUBCATEGORIES:
            return True
        if "AI" in subcategory.split():
            return True
    return False


def determine_category(directory: str, content: str) -> str:
    name = directory.lower()

    if any(ai in name for ai in AI_NODES):
        return "AI"
    if name in CORE_NODES:
        return "Core Utilities"
    if "implements ITriggerNode" in content or "trigger" in name or "webhook" in name:
        return "Trigger Nodes"
    if any(db in name for db in DATABASE_NODES):
        return "Database"
    if any(cloud in name for cloud in CLOUD_NODES):
        return "Cloud Services"
    if any(comm in name for comm in COMMUNICATION_NODES):
        return "Communication"
    return "Action"


def determine_subcategory(directory: str) -> Optional[str]:
    name = directory.lower()
    for fragment, subcategory in SUBCATEGORY_HINTS:
        if fragment in name:
            return subcategory
    return None


# =============================================================================
# FIELD EXTRACTION
# =============================================================================

def _first(pattern: re.Pattern, content: str) -> Optional[str]:
    match = pattern.search(content)
    return match.group(1) if match else None


def _extract_credentials(content: str) -> list[str]:
    block = _RE_CREDENTIALS_BLOCK.search(content)
    if not block:
        return []
    return list(dict.fromkeys(_RE_NAME.findall(block.group(1))))


def _extract_operations(content: str) -> list[str]:
    return list(dict.fromkeys(value for _, value in _RE_OPTION.findall(content)))


def _default_name(directory: str) -> str:
    # n8n node names are the directory name in lower camel case
    return directory[:1].lower() + directory[1:]


def documentation_url(node_name: str) -> str:
    return f"{DOCS_BASE_URL}/{NODE_TYPE_PREFIX}{node_name.lower()}/"


def parse_entity_record(record: RawNodeRecord) -> CatalogEntity:
    """Parse one node definition into a catalog entity.

    Raises:
        MalformedEntityError: content is empty or carries neither a
            ``displayName`` nor a ``name`` field.
    """
    content = record.content
    if not content or not content.strip():
        raise MalformedEntityError(record.directory, "empty content")

    display_name = _first(_RE_DISPLAY_NAME, content)
    node_name = _first(_RE_NAME, content)
    if display_name is None and node_name is None:
        raise MalformedEntityError(record.directory, "no node description found")

    node_name = node_name or _default_name(record.directory)
    identifier = f"{NODE_TYPE_PREFIX}{node_name}"
    display_name = (display_name or record.directory).strip() or record.directory

    group = _first(_RE_GROUP, content)
    is_trigger = (
        group == "trigger"
        or "implements ITriggerNode" in content
        or "trigger" in record.directory.lower()
    )

    category = determine_category(record.directory, content)
    subcategory = determine_subcategory(record.directory)

    version = _first(_RE_VERSION, content)
    metadata = {
        "version": float(version) if version and "." in version else int(version or 1),
        "icon": _first(_RE_ICON, content),
        "group": group,
        "credentials": _extract_credentials(content),
        "operations": _extract_operations(content),
        "file_name": record.file_name,
        "documentation_url": documentation_url(node_name),
    }
    if record.source_url:
        metadata["source_url"] = record.source_url

    return CatalogEntity(
        identifier=identifier,
        display_name=display_name,
        description=_first(_RE_DESCRIPTION, content) or "",
        category=category,
        subcategory=subcategory,
        tags=list(dict.fromkeys([record.directory.lower(), node_name.lower()])),
        is_trigger=is_trigger,
        is_ai=derive_ai_flag(identifier, category, subcategory),
        metadata=metadata,
    )
