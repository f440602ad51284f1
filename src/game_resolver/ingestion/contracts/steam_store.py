"""
Data contracts for Steam Store API responses.

These Pydantic models define the subset of /appdetails data
surfaced next to a resolved title.
"""

from typing import Annotated

from pydantic import BaseModel, Field


class PriceOverview(BaseModel):
    """Price information for a game."""

    currency: str = Field(..., description="Currency code (e.g., USD, EUR)")
    final: int = Field(..., description="Final price in cents (after discount)")
    discount_percent: int = Field(default=0, ge=0, le=100, description="Discount percentage")
    final_formatted: str = Field(default="", description="Formatted final price")


class ReleaseDate(BaseModel):
    """Release date information."""

    coming_soon: bool = Field(default=False, description="Whether the game is not yet released")
    date: str = Field(default="", description="Release date string")


class SteamStoreGame(BaseModel):
    """
    Title details from the Steam Store API.

    Represents the ``data`` object of the /appdetails response.
    """

    steam_appid: int = Field(..., description="Steam application ID")
    name: str = Field(default="Unknown", description="Game name")
    type: str = Field(default="game", description="Type: game, dlc, demo, etc.")
    short_description: str = Field(default="", description="Brief description")
    is_free: bool = Field(default=False, description="Whether the game is free")
    developers: list[str] = Field(default_factory=list)
    publishers: list[str] = Field(default_factory=list)
    price_overview: PriceOverview | None = Field(
        default=None, description="Price info (None for free games)"
    )
    release_date: ReleaseDate = Field(default_factory=ReleaseDate)


class SteamStoreAPIResponse(BaseModel):
    """
    Wrapper for one app in the Steam Store API response.

    The API returns {app_id: {success: bool, data: {...}}}
    """

    success: bool
    data: SteamStoreGame | None = None


AppId = Annotated[int, Field(gt=0, description="Steam App ID")]
