"""Top-K ranking of supervisors and roommate candidates."""

from .ranker import SupervisorRanker, PeerRanker

__all__ = ["SupervisorRanker", "PeerRanker"]
