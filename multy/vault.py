"""Vaults, their access policies and secrets."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from multy.compute import VirtualMachine
from multy.resource_group import (
    ChildResource,
    CommonParameters,
    Resource,
    ResourceError,
    Resources,
    ValidationFailed,
    new_rg,
)
from multy.validate import ValidationError


def _get_vault(child: Resource, others: Resources, dependent_id: str, vault_id: str) -> Vault:
    try:
        return others.get(dependent_id, vault_id, Vault)
    except ResourceError as err:
        raise ValidationFailed([child.new_validation_error(err, "vault_id")]) from err


@dataclass
class VaultArgs:
    common_parameters: CommonParameters = field(default_factory=CommonParameters)
    name: str = ""


class Vault(Resource):
    """A store for secrets."""

    args: VaultArgs

    def create(self, resource_id: str, args: VaultArgs, others: Resources) -> None:
        params = args.common_parameters
        if not params.resource_group_id:
            params.resource_group_id = new_rg(
                "kv", others, params.location, params.cloud_provider
            )
        super().create(resource_id, args, others)


class VaultAccess(Enum):
    UNKNOWN = "UNKNOWN"
    READ = "READ"
    WRITE = "WRITE"
    OWNER = "OWNER"


@dataclass
class VaultAccessPolicyArgs:
    vault_id: str = ""
    identity: str = ""
    access: VaultAccess = VaultAccess.UNKNOWN


class VaultAccessPolicy(ChildResource):
    """Grants an identity access to a vault."""

    args: VaultAccessPolicyArgs

    def __init__(
        self,
        resource_id: str = "",
        args: VaultAccessPolicyArgs | None = None,
        parent: Vault | None = None,
    ) -> None:
        super().__init__(resource_id, args, parent)
        self.vault = parent

    def _load(self, resource_id: str, args: VaultAccessPolicyArgs, others: Resources) -> None:
        vault = _get_vault(self, others, resource_id, args.vault_id)
        self.resource_id = resource_id
        self.args = args
        self.parent = vault
        self.vault = vault
        # The identity refers to a machine by role name rather than by id.
        for resource in others.resource_map.values():
            if isinstance(resource, VirtualMachine) and resource.aws_identity == args.identity:
                others.add_dependency(resource_id, resource.resource_id)

    def validate(self) -> list[ValidationError]:
        if self.args.access is VaultAccess.UNKNOWN:
            return [self.new_validation_error("unknown vault access", "access")]
        return []


@dataclass
class VaultSecretArgs:
    name: str = ""
    value: str = ""
    vault_id: str = ""


class VaultSecret(ChildResource):
    """A secret kept in a vault."""

    args: VaultSecretArgs

    def __init__(
        self,
        resource_id: str = "",
        args: VaultSecretArgs | None = None,
        parent: Vault | None = None,
    ) -> None:
        super().__init__(resource_id, args, parent)
        self.vault = parent

    def _load(self, resource_id: str, args: VaultSecretArgs, others: Resources) -> None:
        vault = _get_vault(self, others, resource_id, args.vault_id)
        self.resource_id = resource_id
        self.args = args
        self.parent = vault
        self.vault = vault