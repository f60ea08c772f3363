"""
RAG answer module.

Provides the RAG agent and the pure prompt builder it uses.

Dependencies: langchain_core, langchain_google_genai
System role: Agent module exports
"""

from botkb.core.agentic_system.agent.rag_agent import RAGAgent
from botkb.core.agentic_system.agent.rag_agent_prompt import build_prompt

__all__ = ["RAGAgent", "build_prompt"]
