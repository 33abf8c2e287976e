"""Virtual machines."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from multy.network import NetworkSecurityGroup, PublicIp, Subnet
from multy.resource_group import (
    CommonParameters,
    Resource,
    Resources,
    new_rg_from_parent,
)
from multy.util import map_slice_values
from multy.validate import ValidationError

DEFAULT_IMAGE_VERSION = "18.04"


class OperatingSystem(Enum):
    UNKNOWN_OS = "UNKNOWN_OS"
    UBUNTU = "UBUNTU"
    CENT_OS = "CENT_OS"
    DEBIAN = "DEBIAN"


@dataclass
class ImageReference:
    os: OperatingSystem = OperatingSystem.UNKNOWN_OS
    version: str = ""


@dataclass
class VirtualMachineArgs:
    common_parameters: CommonParameters = field(default_factory=CommonParameters)
    name: str = ""
    network_interface_ids: list[str] = field(default_factory=list)
    network_security_group_ids: list[str] = field(default_factory=list)
    vm_size: str = ""
    user_data_base64: str = ""
    subnet_id: str = ""
    public_ssh_key: str = ""
    public_ip_id: str = ""
    generate_public_ip: bool = False
    image_reference: ImageReference | None = None


class VirtualMachine(Resource):
    """A virtual machine placed in a subnet."""

    args: VirtualMachineArgs

    def __init__(self, resource_id: str = "", args: VirtualMachineArgs | None = None) -> None:
        super().__init__(resource_id, args)
        self.network_interfaces: list[Resource] = []
        self.network_security_groups: list[NetworkSecurityGroup] = []
        self.subnet: Subnet | None = None
        self.public_ip: PublicIp | None = None

    def create(self, resource_id: str, args: VirtualMachineArgs, others: Resources) -> None:
        params = args.common_parameters
        if not params.resource_group_id:
            subnet = others.get(resource_id, args.subnet_id, Subnet)
            params.resource_group_id = new_rg_from_parent(
                "vm",
                subnet.virtual_network.args.common_parameters.resource_group_id,
                others,
                params.location,
                params.cloud_provider,
            )
        super().create(resource_id, args, others)

    def _load(self, resource_id: str, args: VirtualMachineArgs, others: Resources) -> None:
        self.network_interfaces = map_slice_values(
            args.network_interface_ids,
            lambda nic_id: others.get(resource_id, nic_id, Resource),
        )
        self.network_security_groups = map_slice_values(
            args.network_security_group_ids,
            lambda nsg_id: others.get(resource_id, nsg_id, NetworkSecurityGroup),
        )
        self.subnet = others.get(resource_id, args.subnet_id, Subnet)
        self.public_ip = others.get_optional(resource_id, args.public_ip_id, PublicIp)
        if args.image_reference is None:
            args.image_reference = ImageReference(
                os=OperatingSystem.UBUNTU, version=DEFAULT_IMAGE_VERSION
            )
        self.resource_id = resource_id
        self.args = args

    def validate(self) -> list[ValidationError]:
        errors = super().validate()
        if self.args.generate_public_ip and self.network_interfaces:
            errors.append(
                self.new_validation_error(
                    "generate public ip can't be set with network interface ids",
                    "generate_public_ip",
                )
            )
        if self.args.generate_public_ip and self.public_ip is not None:
            errors.append(
                self.new_validation_error(
                    "conflict between generate_public_ip and public_ip_id",
                    "generate_public_ip",
                )
            )
        return errors

    @property
    def aws_identity(self) -> str:
        """Name of the role the machine assumes."""
        return f"multy-vm-{self.resource_id}-role"