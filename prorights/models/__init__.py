from prorights.models.user import User, UserRole
from prorights.models.work import Work, WorkStatus
from prorights.models.contributor import Contributor, ContributorRole
from prorights.models.business_license import BusinessLicense, BusinessType, LicenseStatus
from prorights.models.usage_report import UsageReport
from prorights.models.royalty_distribution import RoyaltyDistribution, PaymentStatus

__all__ = [
    # Accounts
    "User",
    "UserRole",
    # Catalog
    "Work",
    "WorkStatus",
    "Contributor",
    "ContributorRole",
    # Licensing
    "BusinessLicense",
    "BusinessType",
    "LicenseStatus",
    "UsageReport",
    # Royalty models
    "RoyaltyDistribution",
    "PaymentStatus",
]
