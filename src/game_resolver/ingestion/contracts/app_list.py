"""
Data contract for records of the Steam app listing.

Endpoint: ISteamApps/GetAppList/v2/ returns
``{"applist": {"apps": [{"appid": 10, "name": "Counter-Strike"}, ...]}}``.
"""

from pydantic import BaseModel, ConfigDict, Field, field_validator


class RemoteApp(BaseModel):
    """One app record streamed from the remote listing."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    appid: int = Field(..., ge=0, description="Steam application ID")
    name: str = Field(default="", description="Display name, possibly blank")

    @field_validator("appid", mode="before")
    @classmethod
    def reject_non_integer_appid(cls, v: object) -> object:
        """Booleans and fractional numbers are not app ids."""
        if isinstance(v, bool):
            raise ValueError("appid must be an integer")
        if not isinstance(v, int):
            # ijson yields Decimal for non-integral numbers
            try:
                as_int = int(v)  # type: ignore[call-overload]
            except (TypeError, ValueError) as e:
                raise ValueError(f"appid must be an integer, got {v!r}") from e
            if as_int != v:
                raise ValueError(f"appid must be an integer, got {v!r}")
            return as_int
        return v

    @field_validator("name", mode="before")
    @classmethod
    def coerce_missing_name(cls, v: object) -> object:
        """The listing occasionally carries null names."""
        return "" if v is None else v

    @property
    def is_usable(self) -> bool:
        """Whether the record can become a catalog entry."""
        return self.appid > 0 and bool(self.name.strip())
