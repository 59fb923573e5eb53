"""Widgets of the favorites UI."""

from .actor_detail_page import ActorDetailPage
from .actor_picker_dialog import ActorPickerDialog
from .favorite_actors_page import FavoriteActorsPage

__all__ = ["ActorDetailPage", "ActorPickerDialog", "FavoriteActorsPage"]
