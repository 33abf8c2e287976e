from multy.provider import (
    AWS_RESOURCE_NAME,
    AZURE_RESOURCE_NAME,
    GCP_RESOURCE_NAME,
    AwsCredentials,
    AwsProvider,
    AzureCredentials,
    AzureProvider,
    CloudCredentials,
    GcpCredentials,
    GcpProvider,
    Provider,
)
from multy.resource_group import CloudProvider


def _credentials():
    return CloudCredentials(
        aws_creds=AwsCredentials(access_key="placeholder", secret_key="secret", session_token="token"),
        azure_creds=AzureCredentials(
            subscription_id="sub-id",
            tenant_id="tenant-id",
            client_id="client-id",
            client_secret="secret",
        ),
        gcp_creds=GcpCredentials(credentials="placeholder", project="test-project"),
    )


def test_aws_translate():
    provider = Provider(CloudProvider.AWS, "us-east-1", credentials=_credentials())
    assert provider.translate() == [
        AwsProvider(
            resource_name=AWS_RESOURCE_NAME,
            region="us-east-1",
            alias="us-east-1",
            access_key="placeholder",
            secret_key="secret",
            session_token="token",
        )
    ]


def test_azure_translate_only_for_default_provider():
    assert Provider(CloudProvider.AZURE, "eu-west-1", credentials=_credentials()).translate() == []
    default = Provider(
        CloudProvider.AZURE, "eu-west-1", is_default_provider=True, credentials=_credentials()
    )
    assert default.translate() == [
        AzureProvider(
            resource_name=AZURE_RESOURCE_NAME,
            client_id="client-id",
            subscription_id="sub-id",
            tenant_id="tenant-id",
            client_secret="secret",
        )
    ]
    assert default.translate()[0].features == {}


def test_gcp_translate():
    provider = Provider(CloudProvider.GCP, "europe-west1", credentials=_credentials())
    assert provider.translate() == [
        GcpProvider(
            resource_name=GCP_RESOURCE_NAME,
            region="europe-west1",
            alias="europe-west1",
            credentials="placeholder",
            project="test-project",
        )
    ]


def test_unknown_cloud_translates_to_nothing():
    assert Provider(CloudProvider.UNKNOWN_PROVIDER, "x").translate() == []


def test_default_credentials_are_empty():
    (block,) = Provider(CloudProvider.AWS, "us-east-1").translate()
    assert (block.access_key, block.secret_key, block.session_token) == ("", "", "")


def test_aws_ids():
    provider = Provider(CloudProvider.AWS, "us-east-1")
    assert provider.provider_id == "AWS.us-east-1"
    assert provider.resource_id == f"{AWS_RESOURCE_NAME}.us-east-1"


def test_gcp_resource_id_uses_location_alias():
    provider = Provider(CloudProvider.GCP, "europe-west1")
    assert provider.resource_id == f"{GCP_RESOURCE_NAME}.europe-west1"


def test_azure_has_no_alias():
    provider = Provider(CloudProvider.AZURE, "eu-west-1")
    assert provider.resource_id == ""
    assert provider.provider_id == "AZURE."