from application.watchlist.watchlist_service import LIKED, UNLIKED, WatchlistService

__all__ = ["LIKED", "UNLIKED", "WatchlistService"]
