from __future__ import annotations
"""Post-extraction action manifest model.

A repository may ship a `degit.json` at its root: a JSON array of actions to
apply after its files have been copied. Entries are decoded through a tagged
union; any entry that does not match a known shape is dropped.
"""

from dataclasses import dataclass
from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, StrictStr, TypeAdapter, ValidationError


MANIFEST_FILE_NAME = "degit.json"


class RemoveAction(BaseModel):
    """Delete files relative to the destination root."""

    model_config = ConfigDict(frozen=True)

    action: Literal["remove"]
    files: list[StrictStr]


class CloneAction(BaseModel):
    """Reserved for nested clones. Validated but never executed."""

    model_config = ConfigDict(frozen=True)

    action: Literal["clone"]
    src: StrictStr


ManifestAction = Annotated[Union[RemoveAction, CloneAction], Field(discriminator="action")]

_ACTION_ADAPTER: TypeAdapter[ManifestAction] = TypeAdapter(ManifestAction)


@dataclass(frozen=True, slots=True)
class ActionManifest:
    """Ordered, validated actions decoded from one manifest file."""

    actions: tuple[ManifestAction, ...]
    dropped: int = 0

    @classmethod
    def from_json_value(cls, raw: Any) -> ActionManifest | None:
        """Decode a parsed JSON value.

        Returns:
            The manifest, or `None` when the top-level value is not an array.
        """
        if not isinstance(raw, list):
            return None

        actions: list[ManifestAction] = []
        dropped = 0
        for entry in raw:
            try:
                actions.append(_ACTION_ADAPTER.validate_python(entry))
            except ValidationError:
                dropped += 1

        return cls(actions=tuple(actions), dropped=dropped)
