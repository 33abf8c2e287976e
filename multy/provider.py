"""Cloud provider configuration blocks."""

from __future__ import annotations

from dataclasses import dataclass, field

from multy.resource_group import CloudProvider

AWS_RESOURCE_NAME = "aws"
AZURE_RESOURCE_NAME = "azurerm"
GCP_RESOURCE_NAME = "google"


@dataclass
class AwsCredentials:
    access_key: str = ""
    secret_key: str = ""
    session_token: str = ""


@dataclass
class AzureCredentials:
    subscription_id: str = ""
    tenant_id: str = ""
    client_id: str = ""
    client_secret: str = ""


@dataclass
class GcpCredentials:
    credentials: str = ""
    project: str = ""


@dataclass
class CloudCredentials:
    aws_creds: AwsCredentials = field(default_factory=AwsCredentials)
    azure_creds: AzureCredentials = field(default_factory=AzureCredentials)
    gcp_creds: GcpCredentials = field(default_factory=GcpCredentials)


@dataclass
class AwsProvider:
    resource_name: str
    region: str
    alias: str
    access_key: str
    secret_key: str
    session_token: str


@dataclass
class AzureProvider:
    resource_name: str
    client_id: str
    subscription_id: str
    tenant_id: str
    client_secret: str
    features: dict = field(default_factory=dict)


@dataclass
class GcpProvider:
    resource_name: str
    region: str
    alias: str
    credentials: str
    project: str


@dataclass
class Provider:
    """A provider for one cloud and location."""

    cloud: CloudProvider
    location: str = ""
    is_default_provider: bool = False
    num_resources: int = 0
    credentials: CloudCredentials = field(default_factory=CloudCredentials)
    gcp_project: str = ""

    def translate(self) -> list[AwsProvider | AzureProvider | GcpProvider]:
        """Return the provider blocks to emit for this provider."""
        if self.cloud is CloudProvider.AWS:
            aws = self.credentials.aws_creds
            return [
                AwsProvider(
                    resource_name=self._resource_name,
                    region=self.location,
                    alias=self._alias,
                    access_key=aws.access_key,
                    secret_key=aws.secret_key,
                    session_token=aws.session_token,
                )
            ]
        if self.cloud is CloudProvider.AZURE:
            if not self.is_default_provider:
                return []
            azure = self.credentials.azure_creds
            return [
                AzureProvider(
                    resource_name=self._resource_name,
                    client_id=azure.client_id,
                    subscription_id=azure.subscription_id,
                    tenant_id=azure.tenant_id,
                    client_secret=azure.client_secret,
                )
            ]
        if self.cloud is CloudProvider.GCP:
            gcp = self.credentials.gcp_creds
            return [
                GcpProvider(
                    resource_name=self._resource_name,
                    region=self.location,
                    alias=self._alias,
                    credentials=gcp.credentials,
                    project=gcp.project,
                )
            ]
        return []

    @property
    def _resource_name(self) -> str:
        names = {
            CloudProvider.AWS: AWS_RESOURCE_NAME,
            CloudProvider.AZURE: AZURE_RESOURCE_NAME,
            CloudProvider.GCP: GCP_RESOURCE_NAME,
        }
        try:
            return names[self.cloud]
        except KeyError:
            raise ValueError(f"unhandled cloud {self.cloud}") from None

    @property
    def _alias(self) -> str:
        if self.cloud in (CloudProvider.AWS, CloudProvider.GCP):
            return self.location
        return ""

    @property
    def provider_id(self) -> str:
        return f"{self.cloud}.{self._alias}"

    @property
    def resource_id(self) -> str:
        """The provider reference, empty when the provider has no alias."""
        alias = self._alias
        if not alias:
            return ""
        return f"{self._resource_name}.{alias}"