"""Custom exceptions for the Screener dashboard.

Provides a hierarchy of exceptions for different error conditions:
- ScreenerDashboardError: Base exception for all dashboard errors
- FetchError: A single retrieval attempt failed
- TaxonomyError: The static taxonomy violates its single-owner invariant
- DatasetError: The recommendation dataset does not match the canonical schema
"""


class ScreenerDashboardError(Exception):
    """Base exception for dashboard errors."""


class FetchError(ScreenerDashboardError):
    """Error during document retrieval.

    Attributes:
        url: The URL that failed to fetch.
        status_code: HTTP status returned by the server, if any.
    """

    def __init__(self, url: str, message: str, status_code: int | None = None) -> None:
        """Initialize FetchError.

        Args:
            url: The URL that failed to fetch.
            message: Description of what went wrong.
            status_code: HTTP status returned by the server, if any.
        """
        self.url = url
        self.status_code = status_code
        super().__init__(f"Failed to fetch {url}: {message}")


class TaxonomyError(ScreenerDashboardError):
    """A leaf category is owned by more than one (group, sub-group) pair."""

    def __init__(self, leaf: str, owners: list[tuple[str, str]]) -> None:
        """Initialize TaxonomyError.

        Args:
            leaf: The leaf category listed more than once.
            owners: Every (group, sub-group) pair listing the leaf.
        """
        self.leaf = leaf
        self.owners = owners
        pairs = ", ".join(f"{group}/{sub}" for group, sub in owners)
        super().__init__(f"Leaf category {leaf!r} has multiple owners: {pairs}")


class DatasetError(ScreenerDashboardError):
    """Recommendation dataset is missing or invalid.

    Attributes:
        path: Location of the dataset that failed to load.
    """

    def __init__(self, path: str, message: str) -> None:
        """Initialize DatasetError.

        Args:
            path: Location of the dataset that failed to load.
            message: Description of what went wrong.
        """
        self.path = path
        super().__init__(f"Invalid recommendation dataset {path}: {message}")
