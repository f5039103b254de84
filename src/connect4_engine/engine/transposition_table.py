"""
Transposition table for caching alpha-beta search results.

The transposition table stores previously computed positions to avoid redundant
work during alpha-beta search. Iterative deepening benefits most: positions
searched at depth D-1 are reused when searching depth D.

Key concepts:
- Bound types: EXACT (PV node), LOWER (fail-high/beta cutoff), UPPER (fail-low/alpha cutoff)
- An entry is reused only if its depth covers the request and its bound
  allows a cutoff under the current window
- Replacement policy: Depth-preferred (keep deeper searches of the same position)
- Age tracking: entries from too many root searches ago are ignored
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class BoundType(Enum):
    """Type of bound stored in transposition table entry."""
    EXACT = 0   # Exact value (searched with an open window)
    LOWER = 1   # Lower bound (beta cutoff, actual value >= stored value)
    UPPER = 2   # Upper bound (alpha cutoff, actual value <= stored value)


@dataclass
class TTEntry:
    """
    Transposition table entry.

    Attributes:
        zobrist_hash: Full hash for collision detection
        depth: Remaining search depth when this entry was stored
        score: Evaluation score (or bound)
        bound: Type of bound (EXACT/LOWER/UPPER)
        age: Search generation (for aging out old entries)
    """
    zobrist_hash: int
    depth: int
    score: int
    bound: BoundType
    age: int = 0

    def is_valid(self, query_hash: int, current_age: int, max_age_diff: int = 10) -> bool:
        return (
            self.zobrist_hash == query_hash and
            (current_age - self.age) <= max_age_diff
        )


class TranspositionTable:
    """
    Fixed-size transposition table.

    Implementation:
    - Power-of-2 sized table for fast modulo via bit masking
    - Depth-preferred replacement for the same position, always-replace on collision
    - Age tracking to invalidate entries from old searches
    """

    def __init__(self, size_mb: int = 16):
        """
        Args:
            size_mb: Table size in megabytes (rounded down to a power of 2 entries)
        """
        bytes_per_entry = 64  # Conservative estimate with Python overhead
        num_entries = max(1, (size_mb * 1024 * 1024) // bytes_per_entry)

        self.num_entries = 1 << (num_entries.bit_length() - 1)
        self.index_mask = self.num_entries - 1

        self.table: list[Optional[TTEntry]] = [None] * self.num_entries
        self.current_age = 0

        self.hits = 0
        self.misses = 0
        self.collisions = 0
        self.stores = 0

    def _get_index(self, zobrist_hash: int) -> int:
        return zobrist_hash & self.index_mask

    def probe(self, zobrist_hash: int, depth: int, alpha: int, beta: int) -> Optional[int]:
        """
        Look up a cached score usable at this node.

        Returns the cached score if:
        1. Hash matches (no collision) and the entry is recent
        2. Stored depth >= query depth
        3. Bound type allows cutoff given the current alpha-beta window

        Returns:
            Cached score, or None
        """
        entry = self.table[self._get_index(zobrist_hash)]

        if entry is None:
            self.misses += 1
            return None

        if not entry.is_valid(zobrist_hash, self.current_age):
            if entry.zobrist_hash != zobrist_hash:
                self.collisions += 1
            self.misses += 1
            return None

        if entry.depth < depth:
            self.misses += 1
            return None

        if (entry.bound == BoundType.EXACT
                or (entry.bound == BoundType.LOWER and entry.score >= beta)
                or (entry.bound == BoundType.UPPER and entry.score <= alpha)):
            self.hits += 1
            return entry.score

        self.misses += 1
        return None

    def store(self, zobrist_hash: int, depth: int, score: int, bound: BoundType):
        """Store a search result, keeping deeper results for the same position."""
        index = self._get_index(zobrist_hash)
        existing = self.table[index]

        if existing is not None and existing.zobrist_hash == zobrist_hash:
            if depth < existing.depth:
                return
            if depth == existing.depth and existing.bound == BoundType.EXACT and bound != BoundType.EXACT:
                return

        self.table[index] = TTEntry(
            zobrist_hash=zobrist_hash,
            depth=depth,
            score=score,
            bound=bound,
            age=self.current_age
        )
        self.stores += 1

    def clear(self):
        """Clear all entries (start of a new game)."""
        self.table = [None] * self.num_entries
        self.current_age = 0
        self._reset_stats()

    def new_search(self):
        """Increment age counter for a new root search."""
        self.current_age += 1

    def _reset_stats(self):
        self.hits = 0
        self.misses = 0
        self.collisions = 0
        self.stores = 0

    def __len__(self) -> int:
        return sum(1 for entry in self.table if entry is not None)

    def get_stats(self) -> dict:
        total_queries = self.hits + self.misses
        hit_rate = self.hits / total_queries if total_queries > 0 else 0.0

        return {
            'hits': self.hits,
            'misses': self.misses,
            'hit_rate': hit_rate,
            'collisions': self.collisions,
            'stores': self.stores,
            'size_entries': self.num_entries,
        }
