"""
Vendor matching engine.

Responsibilities:
- Normalize host form input into a match request (budget, categories).
- Score each vendor against the request with deterministic heuristics.
- Rank eligible vendors and keep the top candidates per requested category.
- Explain a score term by term for display.
"""
