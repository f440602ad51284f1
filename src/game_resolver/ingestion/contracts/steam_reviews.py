"""
Data contracts for Steam Reviews API responses.

Only the aggregate query summary is modelled; individual reviews are
never requested.
"""

from pydantic import BaseModel, Field


class ReviewQuerySummary(BaseModel):
    """Aggregate review statistics for an app."""

    num_reviews: int = Field(default=0, description="Number of reviews returned")
    review_score: int = Field(default=0, ge=0, le=9, description="Review score (0-9 scale)")
    review_score_desc: str = Field(
        default="", description="Review score description (e.g., 'Very Positive')"
    )
    total_positive: int = Field(default=0, ge=0, description="Total positive reviews")
    total_negative: int = Field(default=0, ge=0, description="Total negative reviews")
    total_reviews: int = Field(default=0, ge=0, description="Total review count")

    @property
    def positive_ratio(self) -> float | None:
        """Share of positive reviews, None when there are no reviews."""
        if self.total_reviews == 0:
            return None
        return self.total_positive / self.total_reviews

    @property
    def rating_text(self) -> str:
        """Human-readable rating, e.g. ``Very Positive (92.3% positive)``."""
        ratio = self.positive_ratio
        if ratio is None:
            return self.review_score_desc or "No reviews"
        return f"{self.review_score_desc} ({ratio * 100:.1f}% positive)"


class SteamReviewsResponse(BaseModel):
    """
    Response from Steam Reviews API.

    Endpoint: /appreviews/{appid}?json=1
    """

    success: int = Field(..., description="1 if successful, 0 otherwise")
    query_summary: ReviewQuerySummary = Field(default_factory=ReviewQuerySummary)

    @property
    def is_successful(self) -> bool:
        """Check if API request was successful."""
        return self.success == 1
