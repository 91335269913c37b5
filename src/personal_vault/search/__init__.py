"""Search helpers for stored notes and vault items."""

from .lexical import TAG_BOOST, TITLE_BOOST, lexical_score, tag_boost, title_boost
from .pipeline import RankingPipeline
from .query import QUERY_SYNONYMS, enhance_query
from .ranker import ScoredResult, blend_score, rank_results
from .similarity import cosine_similarity

__all__ = [
    "TAG_BOOST",
    "TITLE_BOOST",
    "lexical_score",
    "tag_boost",
    "title_boost",
    "RankingPipeline",
    "QUERY_SYNONYMS",
    "enhance_query",
    "ScoredResult",
    "blend_score",
    "rank_results",
    "cosine_similarity",
]
