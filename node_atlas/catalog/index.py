"""Category and intent lookup over the catalog.

Both lookups are pure functions of the current catalog snapshot and the
input string. Category labels resolve through a static alias table;
intents resolve through a static phrase table with a keyword-overlap
fallback.
"""
from typing import Callable, Optional

from node_atlas.catalog.store import CatalogStore
from node_atlas.models.catalog import CatalogEntity

Predicate = Callable[[CatalogEntity], bool]

INTENT_FALLBACK_LIMIT = 20


def _category_in(*names: str) -> Predicate:
    wanted = {n.lower() for n in names}
    return lambda e: e.category.lower() in wanted


# =============================================================================
# CATEGORY GROUPS
# =============================================================================

GROUPS: dict[str, Predicate] = {
    "ai": lambda e: e.is_ai,
    "communication": _category_in("communication"),
    "business": _category_in("business", "productivity", "crm", "sales", "marketing"),
    "database": _category_in("database", "data & storage"),
    "cloud": _category_in("cloud", "cloud services"),
    "ecommerce": _category_in("e-commerce", "ecommerce"),
    "developer": _category_in("developer tools", "developer", "development"),
}

# alias -> (group, identifier fragment narrowing the group)
CATEGORY_ALIASES: dict[str, tuple[str, Optional[str]]] = {
    "ai": ("ai", None),
    "artificial intelligence": ("ai", None),
    "machine learning": ("ai", None),
    "communication": ("communication", None),
    "messaging": ("communication", None),
    "chat": ("communication", None),
    "business": ("business", None),
    "crm": ("business", None),
    "productivity": ("business", None),
    "database": ("database", None),
    "storage": ("database", None),
    "data": ("database", None),
    "cloud": ("cloud", None),
    "cloud services": ("cloud", None),
    "aws": ("cloud", "aws"),
    "google cloud": ("cloud", "googlecloud"),
    "azure": ("cloud", "azure"),
    "ecommerce": ("ecommerce", None),
    "e-commerce": ("ecommerce", None),
    "shopping": ("ecommerce", None),
    "developer": ("developer", None),
    "developer tools": ("developer", None),
    "development": ("developer", None),
}


def _in_group(group: str, extra: Optional[Predicate] = None) -> Predicate:
    base = GROUPS[group]
    if extra is None:
        return base
    return lambda e: base(e) and extra(e)


def _subcategory_is(name: str) -> Predicate:
    return lambda e: e.subcategory == name


def _identifier_mentions(*fragments: str) -> Predicate:
    return lambda e: any(f in e.identifier.lower() for f in fragments)


def _description_mentions(fragment: str) -> Predicate:
    return lambda e: fragment in e.description.lower()


# =============================================================================
# INTENT TABLE - evaluated in order, first match wins
# =============================================================================

INTENT_TABLE: list[tuple[str, Predicate]] = [
    # AI/ML intents
    ("chat with ai", _in_group("ai", _subcategory_is("Language Models"))),
    ("generate text", _in_group("ai", _subcategory_is("Language Models"))),
    ("analyze sentiment", _in_group("ai", _description_mentions("sentiment"))),
    ("generate images", _in_group("ai", _subcategory_is("Image Generation"))),
    ("search documents", _in_group("ai", _subcategory_is("Vector Databases"))),
    ("embed text", _in_group("ai", _subcategory_is("Embeddings"))),

    # Communication intents
    ("send message", _in_group("communication", _identifier_mentions("slack", "teams"))),
    ("send email", _in_group("communication", _subcategory_is("Email"))),
    ("post to social media", _in_group("communication", _subcategory_is("Social Media"))),
    ("schedule meeting", _in_group("communication", _identifier_mentions("zoom", "calendar"))),

    # Business intents
    ("manage contacts", _in_group("business", _subcategory_is("CRM"))),
    ("track sales", _in_group("business", _subcategory_is("CRM"))),
    ("manage projects", _in_group("business", _subcategory_is("Project Management"))),
    ("handle support tickets", _in_group("business", _subcategory_is("Customer Support"))),

    # Data intents
    ("store data", _in_group("database")),
    ("query database", _in_group("database", _subcategory_is("SQL"))),
    ("cache data", _in_group("database", _identifier_mentions("redis"))),
    ("search data", _in_group("database", _identifier_mentions("elasticsearch"))),

    # Cloud intents
    ("store files", _in_group("cloud", _subcategory_is("Storage"))),
    ("run function", _in_group("cloud", _subcategory_is("Compute"))),
    ("send notification", _in_group("cloud", _subcategory_is("Messaging"))),
]


class CategoryIndex:
    """Resolves category labels and intent phrases to catalog subsets."""

    def __init__(self, store: CatalogStore):
        self.store = store

    def group(self, name: str) -> list[CatalogEntity]:
        """Get all entities of a named group (see GROUPS)."""
        predicate = GROUPS[name]
        return [e for e in self.store.all() if predicate(e)]

    def by_category(self, label: str) -> list[CatalogEntity]:
        """Find entities for a category label or one of its aliases."""
        normalized = label.strip().lower()
        entities = self.store.all()

        alias = CATEGORY_ALIASES.get(normalized)
        if alias is not None:
            group, fragment = alias
            predicate = _in_group(group, _identifier_mentions(fragment) if fragment else None)
            return [e for e in entities if predicate(e)]

        if not normalized:
            return []

        return [
            e for e in entities
            if normalized in e.category.lower()
            or (e.subcategory is not None and normalized in e.subcategory.lower())
        ]

    def by_intent(self, phrase: str) -> list[CatalogEntity]:
        """Find entities that serve an intent phrase."""
        normalized = phrase.strip().lower()
        if not normalized:
            return []

        entities = self.store.all()
        for key, predicate in INTENT_TABLE:
            if key in normalized or normalized in key:
                return [e for e in entities if predicate(e)]

        return self._keyword_overlap(normalized, entities)

    def _keyword_overlap(self, phrase: str, entities: tuple[CatalogEntity, ...]) -> list[CatalogEntity]:
        keywords = phrase.split()
        matches = []
        for entity in entities:
            text = " ".join([entity.display_name, entity.description, entity.category, *entity.tags]).lower()
            if any(keyword in text for keyword in keywords):
                matches.append(entity)
                if len(matches) >= INTENT_FALLBACK_LIMIT:
                    break
        return matches
