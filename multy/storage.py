"""Object storage buckets and the objects stored in them."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import TypeVar

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

R = TypeVar("R", bound=Resource)


def _get_referenced(
    child: Resource,
    others: Resources,
    dependent_id: str,
    target_id: str,
    kind: type[R],
    field_name: str,
) -> R:
    try:
        return others.get(dependent_id, target_id, kind)
    except ResourceError as err:
        raise ValidationFailed([child.new_validation_error(err, field_name)]) from err


@dataclass
class ObjectStorageArgs:
    common_parameters: CommonParameters = field(default_factory=CommonParameters)
    name: str = ""
    versioning: bool = False


class ObjectStorage(Resource):
    """A bucket holding stored objects."""

    args: ObjectStorageArgs

    def create(self, resource_id: str, args: ObjectStorageArgs, others: Resources) -> None:
        params = args.common_parameters
        if not params.resource_group_id:
            params.resource_group_id = new_rg(
                "st", others, params.location, params.cloud_provider
            )
        super().create(resource_id, args, others)


class ObjectStorageObjectAcl(Enum):
    PRIVATE = "PRIVATE"
    PUBLIC_READ = "PUBLIC_READ"


@dataclass
class ObjectStorageObjectArgs:
    name: str = ""
    acl: ObjectStorageObjectAcl = ObjectStorageObjectAcl.PRIVATE
    object_storage_id: str = ""
    content_base64: str = ""
    content_type: str = ""
    source: str = ""


class ObjectStorageObject(ChildResource):
    """An object stored in an object storage bucket."""

    args: ObjectStorageObjectArgs

    def __init__(
        self,
        resource_id: str = "",
        args: ObjectStorageObjectArgs | None = None,
        parent: ObjectStorage | None = None,
    ) -> None:
        super().__init__(resource_id, args, parent)
        self.object_storage = parent

    def _load(self, resource_id: str, args: ObjectStorageObjectArgs, others: Resources) -> None:
        storage = _get_referenced(
            self, others, resource_id, args.object_storage_id, ObjectStorage, "object_storage_id"
        )
        self.resource_id = resource_id
        self.args = args
        self.parent = storage
        self.object_storage = storage

    def validate(self) -> list[ValidationError]:
        if not self.args.content_base64:
            return [self.new_validation_error("content_base64 must be set", "")]
        return []