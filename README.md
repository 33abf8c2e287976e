# multy

A cloud-agnostic model of infrastructure resources: virtual networks, subnets,
route tables and their associations, network security groups, public IPs,
virtual machines, object storage and vaults. Resources live in a shared
`Resources` collection that resolves references between them by id, records
dependencies, creates resource groups implicitly where needed, and lets each
resource validate its own settings.

The package has no third-party dependencies.

## Installation

```
pip install .
```

## Modules

- `multy.resource_group` – the `Resources` collection, the `Resource` and
  `ChildResource` base classes, `CloudProvider`, `CommonParameters`,
  `ResourceGroup`, the exceptions `ResourceError`, `ResourceNotFoundError` and
  `ValidationFailed`, and the helpers `new_rg`, `new_rg_from_parent`,
  `new_resource_group`, `get_resource_group_name` and `random_string`.
- `multy.network` – `VirtualNetwork`, `Subnet`, `RouteTable`,
  `RouteTableAssociation`, `NetworkSecurityGroup`, `PublicIp`, their argument
  classes, and `validate_port`.
- `multy.compute` – `VirtualMachine`, `VirtualMachineArgs`, `ImageReference`.
- `multy.storage` – `ObjectStorage` and `ObjectStorageObject`.
- `multy.vault` – `Vault`, `VaultAccessPolicy` and `VaultSecret`.
- `multy.provider` – `Provider` and the per-cloud credential and provider
  block classes.
- `multy.validate` – `ValidationError`, source `Range`/`Pos`, and
  `read_lines` / `read_lines_for_range` for pulling the lines of a source
  range out of a file.
- `multy.util` – small sorting and mapping helpers.

## Usage

```python
from multy.resource_group import CloudProvider, CommonParameters, Resources
from multy.network import Subnet, SubnetArgs, VirtualNetwork, VirtualNetworkArgs

resources = Resources()

vn = VirtualNetwork()
vn.create(
    "vn1",
    VirtualNetworkArgs(
        common_parameters=CommonParameters(
            location="EU_WEST_1", cloud_provider=CloudProvider.AWS
        ),
        name="main",
        cidr_block="10.0.0.0/16",
    ),
    resources,
)
resources.add(vn)

subnet = Subnet()
subnet.create(
    "subnet1",
    SubnetArgs(name="public", cidr_block="10.0.0.0/24", virtual_network_id="vn1"),
    resources,
)
resources.add(subnet)

for resource in resources.get_all():
    for error in resource.validate():
        print(error.resource_id, error.field_name, error.error_message)
```

### Resource groups

Creating a top-level resource whose `common_parameters.resource_group_id` is
empty adds an implicitly created `ResourceGroup` to the collection and stores
its id in the arguments. Groups are named `<type>-<suffix>-rg`, for example
`vn-ab12-rg` for a virtual network. Network security groups and virtual
machines reuse the suffix of their virtual network's group (`nsg-ab12-rg`,
`vm-ab12-rg`) when that group follows this form; otherwise a new random suffix
is chosen.

A `ResourceGroup` cannot be updated, and its `export()` returns `None` when no
resource in the collection is placed in it.

### References and errors

Child resources (`Subnet`, `RouteTable`, `RouteTableAssociation`,
`ObjectStorageObject`, `VaultAccessPolicy`, `VaultSecret`) look up the
resources they refer to and raise `ValidationFailed` carrying a
`ValidationError` when a reference is missing or of the wrong kind.
`NetworkSecurityGroup` and `VirtualMachine` raise `ResourceNotFoundError` (a
`ResourceError`) for a missing reference. Every successful lookup is recorded
in `Resources.dependencies`.

`validate()` returns a list of `ValidationError` records rather than raising.
It checks, among other things, that a cloud provider is set, that CIDR blocks
parse, that route tables hold at most 20 routes with known destinations, that
security rule ports are between 0 and 65535, that a route table and a subnet
being associated share a virtual network, and that a virtual machine does not
ask for a generated public IP together with network interfaces or a
`public_ip_id`. A virtual machine without an image reference gets Ubuntu 18.04.

### Providers

```python
from multy.provider import Provider
from multy.resource_group import CloudProvider

provider = Provider(cloud=CloudProvider.AWS, location="us-east-1")
blocks = provider.translate()   # [AwsProvider(resource_name="aws", region="us-east-1", ...)]
provider.resource_id            # "aws.us-east-1"
provider.provider_id            # "AWS.us-east-1"
```

An Azure provider yields a block only when `is_default_provider` is true.

## What this package does not do

It models and validates resources in memory only. It does not deploy anything
to a cloud, does not render configuration files from the resources or provider
blocks, does not store configurations, and has no command-line tool or server.

## Running the tests

```
pip install .[test]
pytest
```