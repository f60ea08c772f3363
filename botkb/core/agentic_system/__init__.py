"""
Agentic system package.

Contains the RAG answer agent.
"""
