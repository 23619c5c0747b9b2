"""Shared core for Azure Resource Manager REST service wrappers.

Provides the process-wide token cache, default subscription discovery, the
provider API version table and transport error normalisation that every
service class builds on.
"""

from importlib.metadata import PackageNotFoundError, version

from azure_armrest.availability_set import AvailabilitySetService
from azure_armrest.configuration import ArmrestConfiguration, configure, configure_from_env
from azure_armrest.exceptions import ApiError, ApiErrorKind, ArmrestError, ValidationError
from azure_armrest.providers import ProviderVersionEntry, ProviderVersionTable, provider_table
from azure_armrest.resource_group_based import ResourceGroupBasedService
from azure_armrest.service import ArmrestService, url_with_api_version
from azure_armrest.subscriptions import SubscriptionResolver, subscription_resolver
from azure_armrest.tokens import CredentialIdentity, Token, TokenCache, token_cache

try:
    __version__ = version("azure-armrest")
except PackageNotFoundError:
    __version__ = "0.0.0-dev"

__all__ = [
    "ApiError",
    "ApiErrorKind",
    "ArmrestConfiguration",
    "ArmrestError",
    "ArmrestService",
    "AvailabilitySetService",
    "CredentialIdentity",
    "ProviderVersionEntry",
    "ProviderVersionTable",
    "ResourceGroupBasedService",
    "SubscriptionResolver",
    "Token",
    "TokenCache",
    "ValidationError",
    "configure",
    "configure_from_env",
    "provider_table",
    "subscription_resolver",
    "token_cache",
    "url_with_api_version",
]
