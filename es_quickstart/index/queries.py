from typing import Any, Dict


def build_match_query(field: str, text: str) -> Dict[str, Any]:
    """Full-text ``match`` query of ``text`` against a single field."""
    return {
        "match": {
            field: text,
        }
    }
