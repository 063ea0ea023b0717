"""
Provisio resolves, fetches and renders the YAML artifacts (component manifests and cluster templates) that are
published by versioned provider repositories, such as GitHub releases or a tree on the local filesystem.
"""

__version__ = "0.1.0"
