from .channel import LiveUpdateChannel
from .broadcaster import LeaderboardBroadcaster

__all__ = ['LiveUpdateChannel', 'LeaderboardBroadcaster']
