"""Keyword relevance engine over the tool catalog."""

import logging
from typing import Iterable, List, Optional

from schemas.catalog import CatalogEntry, CategoryCount

logger = logging.getLogger(__name__)


class ToolSearchEngine:
    """
    Scores and ranks catalog entries against free-text queries.

    The engine is a pure function of the catalog it was built with: it
    never mutates entries and keeps no per-request state, so one instance
    can be shared across conversations.
    """

    DEFAULT_LIMIT = 5
    MAX_LIMIT = 10

    EXACT_NAME_SCORE = 100
    NAME_CONTAINS_QUERY = 15
    WORD_IN_NAME = 8
    WORD_IN_COMPANY = 4
    WORD_IN_DESCRIPTION = 5
    WORD_IN_CATEGORY = 3
    WORD_IN_FEATURE = 3
    WORD_IN_BEST_FOR = 3

    MIN_WORD_LENGTH = 2

    def __init__(self, entries: Iterable[CatalogEntry]):
        """
        Initialize engine.

        Args:
            entries: Catalog entries in catalog order
        """
        self._entries = tuple(entries)

    @property
    def entries(self) -> tuple[CatalogEntry, ...]:
        return self._entries

    def score(self, entry: CatalogEntry, query: str) -> int:
        """
        Compute the relevance score of an entry for a query.

        Args:
            entry: Catalog entry
            query: Raw query text

        Returns:
            Integer score, 0 when nothing matches
        """
        q = query.lower()
        name = entry.name.lower()

        if name == q:
            return self.EXACT_NAME_SCORE

        score = 0
        if q in name:
            score += self.NAME_CONTAINS_QUERY

        company = entry.company.lower()
        description = entry.description.lower()
        category = entry.category.lower()
        features = [f.lower() for f in entry.key_features]
        best_for = [b.lower() for b in entry.best_for]

        for word in q.split():
            if len(word) < self.MIN_WORD_LENGTH:
                continue
            if word in name:
                score += self.WORD_IN_NAME
            if word in company:
                score += self.WORD_IN_COMPANY
            if word in description:
                score += self.WORD_IN_DESCRIPTION
            if word in category:
                score += self.WORD_IN_CATEGORY
            score += self.WORD_IN_FEATURE * sum(1 for f in features if word in f)
            score += self.WORD_IN_BEST_FOR * sum(1 for b in best_for if word in b)

        return score

    def search(
        self,
        query: Optional[str] = None,
        category: Optional[str] = None,
        free_only: bool = False,
        limit: int = DEFAULT_LIMIT
    ) -> List[CatalogEntry]:
        """
        Search the catalog.

        Args:
            query: Free-text keywords
            category: Case-insensitive substring filter on category
            free_only: Only keep tools with a free tier
            limit: Maximum results, clamped to [1, 10]

        Returns:
            Entries ordered by descending relevance (catalog order on ties)
        """
        limit = max(1, min(int(limit), self.MAX_LIMIT))
        results = list(self._entries)

        if category:
            category_lower = category.lower()
            results = [e for e in results if category_lower in e.category.lower()]

        if free_only:
            results = [e for e in results if e.pricing.free]

        if query:
            q = query.lower()
            scored = [(entry, self.score(entry, q)) for entry in results]
            # sorted() is stable, so equal scores keep catalog order
            scored = sorted(
                (pair for pair in scored if pair[1] > 0),
                key=lambda pair: pair[1],
                reverse=True
            )
            results = [entry for entry, _ in scored]

            if not results:
                # Broader match over the whole catalog; filters are not reapplied
                logger.debug(f"No scored matches for '{query}', using fallback scan")
                results = self._fallback_scan(q)

        return results[:limit]

    def _fallback_scan(self, q: str) -> List[CatalogEntry]:
        """Return entries whose flattened text contains any query word."""
        words = [w for w in q.split() if len(w) >= self.MIN_WORD_LENGTH]
        matches = []
        for entry in self._entries:
            text = " ".join([
                entry.name,
                entry.company,
                entry.description,
                entry.category,
                *entry.key_features,
                *entry.best_for,
            ]).lower()
            if any(word in text for word in words):
                matches.append(entry)
        return matches

    def get_tool_details(self, tool_name: str) -> Optional[CatalogEntry]:
        """
        Look up a tool by name.

        Tries an exact case-insensitive match, then the first tool whose
        name contains the query, then the first tool whose name is
        contained in the query.
        """
        needle = tool_name.lower()

        for entry in self._entries:
            if entry.name.lower() == needle:
                return entry

        for entry in self._entries:
            if needle in entry.name.lower():
                return entry

        for entry in self._entries:
            if entry.name.lower() in needle:
                return entry

        return None

    def compare_tools(self, tool_names: Iterable[str]) -> List[CatalogEntry]:
        """Resolve each name in order, skipping names that don't match."""
        results = []
        for name in tool_names:
            entry = self.get_tool_details(name)
            if entry is not None:
                results.append(entry)
        return results

    def get_categories(self) -> List[CategoryCount]:
        """Count tools per category, largest first (first-seen order on ties)."""
        counts: dict[str, int] = {}
        for entry in self._entries:
            counts[entry.category] = counts.get(entry.category, 0) + 1

        ordered = sorted(counts.items(), key=lambda item: item[1], reverse=True)
        return [CategoryCount(name=name, count=count) for name, count in ordered]

    def get_total_tool_count(self) -> int:
        return len(self._entries)
