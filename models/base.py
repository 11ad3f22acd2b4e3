from pydantic import BaseModel, ConfigDict, ValidationError
from typing import Any, Optional, TypeVar

ModelT = TypeVar("ModelT", bound="BaseGolfModel")


class BaseGolfModel(BaseModel):
    """
    Shared configuration for the scoring models.

    Models are used as values: mutators return validated copies and leave
    the source untouched. ``update_field`` is the one in-place path, for
    correcting a single entry from user input.
    """
    model_config = ConfigDict(validate_assignment=True)

    def patched(self: ModelT, **changes: Any) -> ModelT:
        """Validated copy with the given fields replaced."""
        return type(self).model_validate({**self.model_dump(), **changes})

    def update_field(self, field_name: str, value: Any) -> Optional[str]:
        """Set one field in place. Returns the validation message instead of raising."""
        if field_name not in type(self).model_fields:
            return f"Unknown field: {field_name}"
        try:
            setattr(self, field_name, value)
        except ValidationError as e:
            return e.errors()[0]['msg']
        return None
