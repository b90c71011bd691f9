from tests.lib.api import AdminCredential, PortfolioApiClient, PortfolioApiError

__all__ = ["AdminCredential", "PortfolioApiClient", "PortfolioApiError"]
