"""
Traversal, identifier and protection helpers over the document tree.

The tree itself lives in `numbered_refs.tree` and is re-exported from `numbered_refs`.
"""
