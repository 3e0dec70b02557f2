from infrastructure.persistence.factory import build_user_store, build_watchlist_store

__all__ = ["build_user_store", "build_watchlist_store"]
