"""Virtual networks, subnets, route tables, security groups and public IPs."""

from __future__ import annotations

import ipaddress
from dataclasses import dataclass, field
from enum import Enum
from itertools import permutations

from multy.resource_group import (
    ChildResource,
    CommonParameters,
    Resource,
    ResourceError,
    Resources,
    ValidationFailed,
    new_rg,
    new_rg_from_parent,
)
from multy.validate import ValidationError

MAX_ROUTES = 20

_Network = ipaddress.IPv4Network | ipaddress.IPv6Network


def _parse_cidr(block: str) -> _Network:
    """Parse an address block in ``address/prefix`` form."""
    if "/" not in block:
        raise ValueError(f"invalid CIDR address: {block}")
    try:
        return ipaddress.ip_network(block, strict=False)
    except ValueError:
        raise ValueError(f"invalid CIDR address: {block}") from None


def _verify_no_overlap(subnets: list[_Network], block: _Network) -> None:
    """Check that every subnet lies inside ``block`` and that none overlap."""
    for subnet in subnets:
        if subnet.version != block.version or not subnet.subnet_of(block):
            raise ValueError(f"{block} does not fully contain {subnet}")
    for first, second in permutations(subnets, 2):
        if first.overlaps(second):
            raise ValueError(f"{first} overlaps with {second}")


def _lookup(child: Resource, others: Resources, dependent_id: str,
            resource_id: str, kind: type, field_name: str):
    try:
        return others.get(dependent_id, resource_id, kind)
    except ResourceError as err:
        raise ValidationFailed([child.new_validation_error(err, field_name)]) from err


@dataclass
class VirtualNetworkArgs:
    common_parameters: CommonParameters = field(default_factory=CommonParameters)
    name: str = ""
    cidr_block: str = ""


class VirtualNetwork(Resource):
    """A private address space in which other resources are placed."""

    args: VirtualNetworkArgs

    def create(self, resource_id: str, args: VirtualNetworkArgs, others: Resources) -> None:
        params = args.common_parameters
        if not params.resource_group_id:
            params.resource_group_id = new_rg(
                "vn", others, params.location, params.cloud_provider
            )
        super().create(resource_id, args, others)

    def validate(self) -> list[ValidationError]:
        errors = super().validate()
        if not self.args.cidr_block:
            errors.append(
                ValidationError(
                    error_message="cidr_block length is invalid",
                    resource_id=self.resource_id,
                    field_name="cidr_block",
                )
            )
        try:
            _parse_cidr(self.args.cidr_block)
        except ValueError as err:
            errors.append(
                ValidationError(
                    error_message=str(err),
                    resource_id=self.resource_id,
                    field_name="cidr_block",
                )
            )
        return errors


@dataclass
class SubnetArgs:
    name: str = ""
    cidr_block: str = ""
    virtual_network_id: str = ""
    availability_zone: int = 0


class Subnet(ChildResource):
    """A range of addresses inside a virtual network."""

    args: SubnetArgs

    def __init__(self, resource_id: str = "", args: SubnetArgs | None = None,
                 parent: VirtualNetwork | None = None) -> None:
        super().__init__(resource_id, args, parent)
        self.virtual_network = parent

    def _load(self, resource_id: str, args: SubnetArgs, others: Resources) -> None:
        vn = _lookup(self, others, resource_id, args.virtual_network_id,
                     VirtualNetwork, "virtual_network_id")
        self.resource_id = resource_id
        self.args = args
        self.parent = vn
        self.virtual_network = vn

    def validate(self) -> list[ValidationError]:
        errors: list[ValidationError] = []
        if not self.args.cidr_block:
            errors.append(
                self.new_validation_error(
                    f"{self.resource_id} cidr_block length is invalid", "cidr_block"
                )
            )
        try:
            vnet_block = _parse_cidr(self.args.cidr_block)
        except ValueError:
            return errors
        try:
            subnet_block = _parse_cidr(self.args.cidr_block)
            _verify_no_overlap([subnet_block], vnet_block)
        except ValueError as err:
            errors.append(self.new_validation_error(str(err), "cidr_block"))
        return errors


class RouteDestination(Enum):
    UNKNOWN_DESTINATION = "UNKNOWN_DESTINATION"
    INTERNET = "INTERNET"


@dataclass
class Route:
    cidr_block: str = ""
    destination: RouteDestination = RouteDestination.UNKNOWN_DESTINATION


@dataclass
class RouteTableArgs:
    name: str = ""
    virtual_network_id: str = ""
    routes: list[Route] = field(default_factory=list)


class RouteTable(ChildResource):
    """Routes applied to the subnets associated with it."""

    args: RouteTableArgs

    def __init__(self, resource_id: str = "", args: RouteTableArgs | None = None,
                 parent: VirtualNetwork | None = None) -> None:
        super().__init__(resource_id, args, parent)
        self.virtual_network = parent

    def _load(self, resource_id: str, args: RouteTableArgs, others: Resources) -> None:
        vn = _lookup(self, others, resource_id, args.virtual_network_id,
                     VirtualNetwork, "virtual_network_id")
        self.resource_id = resource_id
        self.args = args
        self.parent = vn
        self.virtual_network = vn

    def validate(self) -> list[ValidationError]:
        errors: list[ValidationError] = []
        if len(self.args.routes) > MAX_ROUTES:
            errors.append(
                self.new_validation_error(
                    f'"{len(self.args.routes)}" exceeds routes limit is {MAX_ROUTES}',
                    "routes",
                )
            )
        errors.extend(
            self.new_validation_error("unknown route destination", "route")
            for route in self.args.routes
            if route.destination is RouteDestination.UNKNOWN_DESTINATION
        )
        return errors


@dataclass
class RouteTableAssociationArgs:
    subnet_id: str = ""
    route_table_id: str = ""


class RouteTableAssociation(ChildResource):
    """Attaches a route table to a subnet of the same virtual network."""

    args: RouteTableAssociationArgs

    def __init__(self, resource_id: str = "",
                 args: RouteTableAssociationArgs | None = None,
                 parent: RouteTable | None = None) -> None:
        super().__init__(resource_id, args, parent)
        self.route_table = parent
        self.subnet: Subnet | None = None

    def _load(self, resource_id: str, args: RouteTableAssociationArgs,
              others: Resources) -> None:
        rt = _lookup(self, others, resource_id, args.route_table_id,
                     RouteTable, "virtual_network_id")
        self.resource_id = resource_id
        self.args = args
        self.parent = rt
        self.route_table = rt
        self.subnet = _lookup(self, others, resource_id, args.subnet_id,
                              Subnet, "subnet_id")

    def validate(self) -> list[ValidationError]:
        if self.route_table.virtual_network.resource_id != self.subnet.virtual_network.resource_id:
            return [
                self.new_validation_error(
                    f"cannot associate subnet {self.subnet.resource_id} to route_table "
                    f"{self.route_table.resource_id} because they are in different "
                    "virtual networks",
                    "subnet_id",
                )
            ]
        return []


class Direction(Enum):
    UNKNOWN_DIRECTION = "UNKNOWN_DIRECTION"
    INGRESS = "INGRESS"
    EGRESS = "EGRESS"
    BOTH_DIRECTIONS = "BOTH_DIRECTIONS"


@dataclass
class PortRange:
    from_port: int = 0
    to_port: int = 0


@dataclass
class NetworkSecurityRule:
    protocol: str = ""
    priority: int = 0
    port_range: PortRange = field(default_factory=PortRange)
    cidr_block: str = ""
    direction: Direction = Direction.UNKNOWN_DIRECTION


@dataclass
class NetworkSecurityGroupArgs:
    common_parameters: CommonParameters = field(default_factory=CommonParameters)
    name: str = ""
    virtual_network_id: str = ""
    rules: list[NetworkSecurityRule] = field(default_factory=list)


@dataclass
class RuleType:
    """A security rule in the form written to output."""

    protocol: str
    priority: int
    from_port: str
    to_port: str
    cidr_block: str
    direction: str


def validate_port(port: int) -> bool:
    """Tell whether ``port`` is a valid TCP/UDP port number."""
    return 0 <= port <= 65535


class NetworkSecurityGroup(Resource):
    """Traffic rules for the network interfaces it is applied to."""

    args: NetworkSecurityGroupArgs

    def __init__(self, resource_id: str = "",
                 args: NetworkSecurityGroupArgs | None = None) -> None:
        super().__init__(resource_id, args)
        self.virtual_network: VirtualNetwork | None = None

    def create(self, resource_id: str, args: NetworkSecurityGroupArgs,
               others: Resources) -> None:
        params = args.common_parameters
        if not params.resource_group_id:
            vn = others.get(resource_id, args.virtual_network_id, VirtualNetwork)
            params.resource_group_id = new_rg_from_parent(
                "nsg",
                vn.args.common_parameters.resource_group_id,
                others,
                params.location,
                params.cloud_provider,
            )
        super().create(resource_id, args, others)

    def _load(self, resource_id: str, args: NetworkSecurityGroupArgs,
              others: Resources) -> None:
        self.virtual_network = others.get(resource_id, args.virtual_network_id, VirtualNetwork)
        self.resource_id = resource_id
        self.args = args

    def validate(self) -> list[ValidationError]:
        errors = super().validate()
        for rule in self.args.rules:
            if not validate_port(rule.port_range.to_port):
                errors.append(
                    self.new_validation_error(
                        f'rule to_port "{rule.port_range.to_port}" is not valid', "rules"
                    )
                )
            if not validate_port(rule.port_range.from_port):
                errors.append(
                    self.new_validation_error(
                        f'rule from_port "{rule.port_range.from_port}" is not valid', "rules"
                    )
                )
        return errors


@dataclass
class PublicIpArgs:
    common_parameters: CommonParameters = field(default_factory=CommonParameters)
    name: str = ""


class PublicIp(Resource):
    """A public address that can be attached to a machine or interface."""

    args: PublicIpArgs

    def create(self, resource_id: str, args: PublicIpArgs, others: Resources) -> None:
        params = args.common_parameters
        if not params.resource_group_id:
            params.resource_group_id = new_rg(
                "pip", others, params.location, params.cloud_provider
            )
        super().create(resource_id, args, others)