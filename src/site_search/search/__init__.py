"""
Search indexing and query engine package.

This package provides a pure-Python search stack:
- fuzzy: edit distance and per-field fuzzy scoring
- snippet: excerpt extraction for result previews
- storage: JSON index artifact persistence
- indexer: content flattening and artifact builds
- engine: in-memory ranking over the document list
"""
