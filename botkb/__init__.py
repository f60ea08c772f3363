"""
Bot knowledge base.

Per-bot document ingestion into a vector index and retrieval-augmented
answering over it. Services live in botkb.application.services and are
wired by botkb.dependencies.
"""
