from .favorite_actors_controller import FavoriteActorsController, FetchToken, FetchTokens

__all__ = ["FavoriteActorsController", "FetchToken", "FetchTokens"]
