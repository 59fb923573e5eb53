"""Qt models for the favorites UI."""

from .favorite_actor_model import FavoriteActorListModel, RowRenderer
from .roles import Roles, role_names
from .row_display import ImageState, RowDisplay

__all__ = ["FavoriteActorListModel", "ImageState", "Roles", "RowDisplay", "RowRenderer", "role_names"]
