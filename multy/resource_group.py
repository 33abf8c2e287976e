"""Resource registry, shared resource base classes and resource groups."""

from __future__ import annotations

import random
import re
import string
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, TypeVar

from multy.util import get_sorted_map_values
from multy.validate import ValidationError

AZURE_RESOURCE_NAME = "azurerm_resource_group"

_RG_ID_PATTERN = re.compile(r"\w+-(\w+)-rg")
_RANDOM_ALPHABET = string.ascii_lowercase + string.digits


class CloudProvider(Enum):
    """Cloud a resource is deployed to."""

    UNKNOWN_PROVIDER = "UNKNOWN_PROVIDER"
    AWS = "AWS"
    AZURE = "AZURE"
    GCP = "GCP"

    def __str__(self) -> str:
        return self.value


@dataclass
class CommonParameters:
    """Placement parameters shared by top-level resources."""

    resource_group_id: str = ""
    location: str = ""
    cloud_provider: CloudProvider = CloudProvider.UNKNOWN_PROVIDER


class ResourceError(Exception):
    """A resource could not be created, looked up or changed."""


class ResourceNotFoundError(ResourceError):
    """A referenced resource does not exist."""

    def __init__(self, resource_id: str) -> None:
        super().__init__(f"resource with id {resource_id} not found")
        self.resource_id = resource_id


class ValidationFailed(Exception):
    """One or more validation errors stop an operation."""

    def __init__(self, errors: list[ValidationError]) -> None:
        self.errors = list(errors)
        message = "; ".join(error.error_message for error in self.errors)
        super().__init__(message or "validation failed")


R = TypeVar("R", bound="Resource")


class Resources:
    """All resources of one configuration, keyed by id, with their dependencies."""

    def __init__(self) -> None:
        self.resource_map: dict[str, Resource] = {}
        self.dependencies: dict[str, set[str]] = {}

    def add(self, resource: Resource) -> None:
        if resource.resource_id in self.resource_map:
            raise ResourceError(f"resource with id {resource.resource_id} already exists")
        self.resource_map[resource.resource_id] = resource

    def get_all(self) -> list[Resource]:
        """Return every resource, ordered by id."""
        return get_sorted_map_values(self.resource_map)

    def get(self, dependent_id: str, resource_id: str, kind: type[R]) -> R:
        """Look up a resource of ``kind`` and record that ``dependent_id`` needs it."""
        resource = self.resource_map.get(resource_id)
        if resource is None:
            raise ResourceNotFoundError(resource_id)
        if not isinstance(resource, kind):
            raise ResourceError(
                f"resource with id {resource_id} is not of type {kind.__name__}"
            )
        if dependent_id:
            self.add_dependency(dependent_id, resource_id)
        return resource

    def get_optional(self, dependent_id: str, resource_id: str, kind: type[R]) -> R | None:
        """Like get, but an empty id gives None."""
        if not resource_id:
            return None
        return self.get(dependent_id, resource_id, kind)

    def add_dependency(self, resource_id: str, dependency_id: str) -> None:
        self.dependencies.setdefault(resource_id, set()).add(dependency_id)


class Resource:
    """A resource identified by id and described by its arguments."""

    def __init__(self, resource_id: str = "", args: Any = None) -> None:
        self.resource_id = resource_id
        self.args = args

    def _load(self, resource_id: str, args: Any, others: Resources) -> None:
        self.resource_id = resource_id
        self.args = args

    def create(self, resource_id: str, args: Any, others: Resources) -> None:
        self._load(resource_id, args, others)

    def update(self, args: Any, others: Resources) -> None:
        self._load(self.resource_id, args, others)

    def import_resource(self, resource_id: str, args: Any, others: Resources) -> None:
        self._load(resource_id, args, others)

    def export(self, others: Resources) -> Any:
        """Return the arguments to store, or None when nothing should be stored."""
        return self.args

    @property
    def _common_parameters(self) -> CommonParameters | None:
        return getattr(self.args, "common_parameters", None)

    @property
    def resource_group_id(self) -> str:
        params = self._common_parameters
        return params.resource_group_id if params is not None else ""

    def validate(self) -> list[ValidationError]:
        params = self._common_parameters
        if params is None or params.cloud_provider is CloudProvider.UNKNOWN_PROVIDER:
            return [self.new_validation_error("unknown cloud provider", "cloud_provider")]
        return []

    def new_validation_error(self, message: str | Exception, field_name: str) -> ValidationError:
        if isinstance(message, ResourceNotFoundError):
            return ValidationError(
                error_message=str(message),
                resource_id=self.resource_id,
                field_name=field_name,
                resource_not_found=True,
                resource_not_found_id=message.resource_id,
            )
        return ValidationError(
            error_message=str(message),
            resource_id=self.resource_id,
            field_name=field_name,
        )


class ChildResource(Resource):
    """A resource that lives inside a parent resource and shares its group."""

    def __init__(self, resource_id: str = "", args: Any = None, parent: Resource | None = None) -> None:
        super().__init__(resource_id, args)
        self.parent = parent

    @property
    def resource_group_id(self) -> str:
        return self.parent.resource_group_id if self.parent is not None else ""

    def validate(self) -> list[ValidationError]:
        """Child resources take their placement from the parent, so nothing is checked here."""
        return []


@dataclass
class ResourceGroupArgs:
    common_parameters: CommonParameters = field(default_factory=CommonParameters)
    name: str = ""


class ResourceGroup(Resource):
    """A group that holds other resources; its id is its name."""

    def __init__(
        self,
        resource_id: str = "",
        args: ResourceGroupArgs | None = None,
        implicitly_created: bool = False,
    ) -> None:
        super().__init__(resource_id, args)
        self.implicitly_created = implicitly_created

    def _load(self, resource_id: str, args: ResourceGroupArgs, others: Resources) -> None:
        self.resource_id = args.name
        self.args = args

    def update(self, args: ResourceGroupArgs, others: Resources) -> None:
        raise ResourceError("resource groups can't be updated")

    def export(self, others: Resources) -> ResourceGroupArgs | None:
        if not self.get_all_dependent_resources(others):
            return None
        return ResourceGroupArgs(
            common_parameters=CommonParameters(
                location=self.args.common_parameters.location,
                cloud_provider=self.args.common_parameters.cloud_provider,
            ),
            name=self.args.name,
        )

    def validate(self) -> list[ValidationError]:
        return []

    def get_all_dependent_resources(self, others: Resources) -> list[str]:
        """Return the ids of resources placed in this group."""
        return [
            other.resource_id
            for other in others.get_all()
            if getattr(other, "resource_group_id", None) == self.resource_id
        ]


def random_string(length: int) -> str:
    """Return ``length`` random lower-case letters and digits."""
    return "".join(random.choices(_RANDOM_ALPHABET, k=length))


def _default_resource_group_id(resource_type: str, group_id: str) -> str:
    return f"{resource_type}-{group_id}-rg"


def _rg_name_exists(resources: Resources, name: str) -> bool:
    return any(
        isinstance(resource, ResourceGroup) and resource.resource_id == name
        for resource in resources.get_all()
    )


def new_resource_group(name: str, location: str, cloud: CloudProvider) -> ResourceGroup:
    """Build an implicitly created resource group named ``name``."""
    return ResourceGroup(
        resource_id=name,
        args=ResourceGroupArgs(
            common_parameters=CommonParameters(location=location, cloud_provider=cloud),
            name=name,
        ),
        implicitly_created=True,
    )


def new_rg(resource_type: str, resources: Resources, location: str, cloud: CloudProvider) -> str:
    """Add a resource group with a fresh random name and return its id."""
    while True:
        name = _default_resource_group_id(resource_type, random_string(4))
        if not _rg_name_exists(resources, name):
            break
    resources.add(new_resource_group(name, location, cloud))
    return name


def new_rg_from_parent(
    resource_type: str,
    parent_resource_group_id: str,
    resources: Resources,
    location: str,
    cloud: CloudProvider,
) -> str:
    """Return a group id that shares the parent group's suffix, adding it if needed.

    Falls back to a new random group when the parent group is unknown or its id
    does not follow the ``<type>-<suffix>-rg`` form.
    """
    try:
        parent = resources.get_optional("", parent_resource_group_id, ResourceGroup)
    except ResourceError:
        parent = None
    if parent is not None:
        match = _RG_ID_PATTERN.search(parent.resource_id)
        if match:
            rg_id = _default_resource_group_id(resource_type, match.group(1))
            if not _rg_name_exists(resources, rg_id):
                resources.add(new_resource_group(rg_id, location, cloud))
            return rg_id
    return new_rg(resource_type, resources, location, cloud)


def get_resource_group_name(name: str) -> str:
    """Return the reference to the name attribute of a group's output block."""
    return f"{AZURE_RESOURCE_NAME}.{name}.name"