"""
Compatibility-Based Assignment Engine

This package pairs people into rooms and ranks candidate supervisors
using a multi-factor compatibility score.

Key Design Decisions:
- Scoring, pairing and ranking are pure functions with no I/O
- Missing biographical data degrades to neutral factor values, never errors
- Pairing is a greedy heuristic, not an exact weighted-matching solver
- Persistence happens only through the AssignmentStore, on explicit apply
"""

__version__ = "1.0.0"
