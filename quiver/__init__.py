"""
QUIVER - Quantified Item Valuation for Employer Relevance

Tailors a candidate's resume to a specific job description. A language model
scores every resume item for relevance; a deterministic selection algorithm
decides which items survive.

Architecture:
- Targeting Context: Score parsing, item selection, and resume filtering (pure, no I/O)
- Tailoring Context: Multi-stage LLM pipeline and the fallback chain around it
"""

__version__ = "0.1.0"
