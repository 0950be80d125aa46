from typing import Any, Dict, List


class LeaderboardBroadcaster:
    """Pushes the full top-N leaderboard to every subscriber.

    Each push is a complete snapshot of the current store, never a delta.
    """

    def __init__(self, store, channel, size: int = 20):
        self.store = store
        self.channel = channel
        self.size = size

    def snapshot(self) -> List[Dict[str, Any]]:
        return [row.to_leaderboard_dict(rank) for rank, row in self.store.top_n(self.size)]

    def broadcast(self) -> None:
        self.channel.publish_leaderboard(self.snapshot())
