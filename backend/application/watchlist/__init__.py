from application.watchlist.watchlist_service import WatchlistService

__all__ = ["WatchlistService"]
