"""Index settings and mappings for the board index.

Titles are matched through an n-gram analyzer so partial words hit; contents
are split on whitespace only. ``writer`` is kept as a keyword for exact match.
"""

from typing import Any, Dict, Optional

NGRAM_ANALYZER = "word_analyzer"
NGRAM_TOKENIZER = "text_tokenizer"

DEFAULT_SHARDS = 1
DEFAULT_REPLICAS = 0

# Exact-match field used for boardId lookups.
BOARD_ID_FIELD = "boardId"
BOARD_ID_LOOKUP_FIELD = "boardId.keyword"

ANALYSIS: Dict[str, Any] = {
    "analyzer": {
        NGRAM_ANALYZER: {
            "tokenizer": NGRAM_TOKENIZER,
            "filter": ["lowercase"],
        }
    },
    "tokenizer": {
        NGRAM_TOKENIZER: {
            "type": "ngram",
            "min_gram": 2,
            "max_gram": 5,
            "token_chars": ["letter", "digit", "symbol", "punctuation"],
        }
    },
}

MAPPINGS: Dict[str, Any] = {
    "properties": {
        "boardId": {
            "type": "text",
            "fields": {"keyword": {"type": "keyword"}},
        },
        "title": {"type": "text", "analyzer": NGRAM_ANALYZER},
        "content": {"type": "text", "analyzer": "whitespace"},
        "writer": {"type": "keyword"},
        "password": {"type": "text"},
        "comments": {
            "properties": {
                "boardId": {"type": "keyword"},
                "writer": {"type": "text"},
                "password": {"type": "text"},
                "content": {"type": "text", "analyzer": "whitespace"},
                "created": {"type": "integer"},
            }
        },
        "like": {"type": "integer"},
        "dislike": {"type": "integer"},
        "created": {"type": "integer"},
    }
}


def build_index_settings(shards: Optional[int] = None, replicas: Optional[int] = None) -> Dict[str, Any]:
    """Index-level settings, falling back to one shard and no replicas."""
    return {
        "number_of_shards": shards if shards is not None else DEFAULT_SHARDS,
        "number_of_replicas": replicas if replicas is not None else DEFAULT_REPLICAS,
        "max_ngram_diff": 3,
        "analysis": ANALYSIS,
    }


def build_index_mappings() -> Dict[str, Any]:
    return MAPPINGS
