import re

import pytest

from multy.network import (
    NetworkSecurityGroup,
    NetworkSecurityGroupArgs,
    NetworkSecurityRule,
    PortRange,
    PublicIp,
    PublicIpArgs,
    Route,
    RouteDestination,
    RouteTable,
    RouteTableArgs,
    RouteTableAssociation,
    RouteTableAssociationArgs,
    Subnet,
    SubnetArgs,
    VirtualNetwork,
    VirtualNetworkArgs,
    validate_port,
)
from multy.resource_group import (
    CloudProvider,
    CommonParameters,
    ResourceGroup,
    ResourceNotFoundError,
    Resources,
    ValidationFailed,
)


def _vn(resources, resource_id, cidr="10.0.0.0/16", rg_id=""):
    vn = VirtualNetwork()
    vn.create(
        resource_id,
        VirtualNetworkArgs(
            common_parameters=CommonParameters(
                resource_group_id=rg_id,
                location="EU_WEST_1",
                cloud_provider=CloudProvider.AZURE,
            ),
            name="test-vn",
            cidr_block=cidr,
        ),
        resources,
    )
    resources.add(vn)
    return vn


def _subnet(resources, resource_id, vn_id, cidr="10.0.0.0/24"):
    subnet = Subnet()
    subnet.create(resource_id, SubnetArgs(name="s", cidr_block=cidr, virtual_network_id=vn_id), resources)
    resources.add(subnet)
    return subnet


def _route_table(resources, resource_id, vn_id, routes=()):
    rt = RouteTable()
    rt.create(resource_id, RouteTableArgs(name="rt", virtual_network_id=vn_id, routes=list(routes)), resources)
    resources.add(rt)
    return rt


def test_virtual_network_create_adds_resource_group():
    resources = Resources()
    vn = _vn(resources, "vn1")
    rg_id = vn.args.common_parameters.resource_group_id
    assert re.fullmatch(r"vn-[a-z0-9]{4}-rg", rg_id)
    rg = resources.resource_map[rg_id]
    assert isinstance(rg, ResourceGroup)
    assert rg.args.common_parameters.cloud_provider is CloudProvider.AZURE
    assert rg.get_all_dependent_resources(resources) == ["vn1"]


def test_virtual_network_keeps_given_resource_group():
    resources = Resources()
    vn = _vn(resources, "vn1", rg_id="test-rg1")
    assert vn.args.common_parameters.resource_group_id == "test-rg1"
    assert [r.resource_id for r in resources.get_all()] == ["vn1"]


def test_virtual_network_valid_cidr():
    resources = Resources()
    assert _vn(resources, "vn1").validate() == []


def test_virtual_network_empty_cidr_gives_two_errors():
    resources = Resources()
    errors = _vn(resources, "vn1", cidr="").validate()
    assert len(errors) == 2
    assert errors[0].error_message == "cidr_block length is invalid"
    assert all(e.field_name == "cidr_block" and e.resource_id == "vn1" for e in errors)


def test_virtual_network_invalid_cidr():
    resources = Resources()
    errors = _vn(resources, "vn1", cidr="10.0.0.0").validate()
    assert [e.error_message for e in errors] == ["invalid CIDR address: 10.0.0.0"]


def test_virtual_network_unknown_cloud():
    resources = Resources()
    vn = VirtualNetwork()
    vn.create("vn1", VirtualNetworkArgs(cidr_block="10.0.0.0/16"), resources)
    errors = vn.validate()
    assert [e.field_name for e in errors] == ["cloud_provider"]


def test_subnet_links_to_virtual_network():
    resources = Resources()
    vn = _vn(resources, "vn1")
    subnet = _subnet(resources, "subnet1", "vn1")
    assert subnet.virtual_network is vn
    assert subnet.resource_group_id == vn.resource_group_id
    assert resources.dependencies["subnet1"] == {"vn1"}
    assert subnet.validate() == []


def test_subnet_missing_virtual_network():
    resources = Resources()
    with pytest.raises(ValidationFailed) as info:
        Subnet().create("subnet1", SubnetArgs(cidr_block="10.0.0.0/24", virtual_network_id="nope"), resources)
    (error,) = info.value.errors
    assert error.field_name == "virtual_network_id"
    assert error.resource_not_found
    assert error.resource_not_found_id == "nope"


def test_subnet_empty_cidr():
    resources = Resources()
    _vn(resources, "vn1")
    errors = _subnet(resources, "subnet1", "vn1", cidr="").validate()
    assert [e.error_message for e in errors] == ["subnet1 cidr_block length is invalid"]


def test_route_table_validation():
    resources = Resources()
    _vn(resources, "vn1")
    ok = _route_table(resources, "rt1", "vn1", [Route("0.0.0.0/0", RouteDestination.INTERNET)])
    assert ok.validate() == []
    bad = _route_table(resources, "rt2", "vn1", [Route("0.0.0.0/0")])
    assert [(e.error_message, e.field_name) for e in bad.validate()] == [("unknown route destination", "route")]


def test_route_table_route_limit():
    resources = Resources()
    _vn(resources, "vn1")
    routes = [Route("0.0.0.0/0", RouteDestination.INTERNET)] * 21
    errors = _route_table(resources, "rt1", "vn1", routes).validate()
    assert [e.field_name for e in errors] == ["routes"]
    assert "21" in errors[0].error_message
    limit = [Route("0.0.0.0/0", RouteDestination.INTERNET)] * 20
    assert _route_table(resources, "rt2", "vn1", limit).validate() == []


def test_route_table_association_same_network():
    resources = Resources()
    _vn(resources, "vn1")
    subnet = _subnet(resources, "subnet1", "vn1")
    rt = _route_table(resources, "rt1", "vn1")
    rta = RouteTableAssociation()
    rta.create("rta1", RouteTableAssociationArgs(subnet_id="subnet1", route_table_id="rt1"), resources)
    assert rta.route_table is rt
    assert rta.subnet is subnet
    assert rta.validate() == []


def test_route_table_association_different_networks():
    resources = Resources()
    _vn(resources, "vn1")
    _vn(resources, "vn2")
    _subnet(resources, "subnet1", "vn1")
    _route_table(resources, "rt1", "vn2")
    rta = RouteTableAssociation()
    rta.create("rta1", RouteTableAssociationArgs(subnet_id="subnet1", route_table_id="rt1"), resources)
    errors = rta.validate()
    assert [e.field_name for e in errors] == ["subnet_id"]
    assert "subnet1" in errors[0].error_message and "rt1" in errors[0].error_message


def test_route_table_association_missing_subnet():
    resources = Resources()
    _vn(resources, "vn1")
    _route_table(resources, "rt1", "vn1")
    with pytest.raises(ValidationFailed) as info:
        RouteTableAssociation().create(
            "rta1", RouteTableAssociationArgs(subnet_id="missing", route_table_id="rt1"), resources
        )
    assert [e.field_name for e in info.value.errors] == ["subnet_id"]


def test_validate_port_bounds():
    assert validate_port(0)
    assert validate_port(65535)
    assert not validate_port(-1)
    assert not validate_port(65536)


def _nsg_args(rules=(), vn_id="vn1"):
    return NetworkSecurityGroupArgs(
        common_parameters=CommonParameters(location="EU_WEST_1", cloud_provider=CloudProvider.AZURE),
        name="nsg",
        virtual_network_id=vn_id,
        rules=list(rules),
    )


def test_nsg_resource_group_follows_network():
    resources = Resources()
    vn = _vn(resources, "vn1")
    suffix = vn.resource_group_id.split("-")[1]
    nsg = NetworkSecurityGroup()
    nsg.create("nsg1", _nsg_args(), resources)
    assert nsg.resource_group_id == f"nsg-{suffix}-rg"
    assert nsg.resource_group_id in resources.resource_map
    assert nsg.virtual_network is vn


def test_nsg_missing_network():
    resources = Resources()
    with pytest.raises(ResourceNotFoundError):
        NetworkSecurityGroup().create("nsg1", _nsg_args(vn_id="nope"), resources)


def test_nsg_rule_ports():
    resources = Resources()
    _vn(resources, "vn1")
    good = NetworkSecurityRule("tcp", 100, PortRange(22, 22), "0.0.0.0/0")
    bad = NetworkSecurityRule("tcp", 110, PortRange(-1, 70000), "0.0.0.0/0")
    nsg = NetworkSecurityGroup()
    nsg.create("nsg1", _nsg_args([good, bad]), resources)
    errors = nsg.validate()
    assert [e.error_message for e in errors] == [
        'rule to_port "70000" is not valid',
        'rule from_port "-1" is not valid',
    ]
    assert all(e.field_name == "rules" for e in errors)


def test_public_ip_create_adds_resource_group():
    resources = Resources()
    pip = PublicIp()
    pip.create(
        "pip1",
        PublicIpArgs(CommonParameters(location="EU_WEST_1", cloud_provider=CloudProvider.AWS), "ip"),
        resources,
    )
    assert re.fullmatch(r"pip-[a-z0-9]{4}-rg", pip.resource_group_id)
    assert isinstance(resources.resource_map[pip.resource_group_id], ResourceGroup)
    assert pip.validate() == []