import logging
from dataclasses import dataclass, field, fields
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional, Union, get_args, get_origin, get_type_hints

from dateutil.parser import isoparse

logger = logging.getLogger(__name__)


class ModelValidationError(Exception):
    """
    Exception raised when one or more validation errors occur in the model.

    Attributes:
        errors (list): A list of error messages returned from validation methods.
    """

    def __init__(self, errors):
        if isinstance(errors, str):
            errors = [errors]
        elif not isinstance(errors, list):
            raise ValueError("Errors should be a string or a list of strings")
        self.errors = errors
        super().__init__(self.format_errors())

    def format_errors(self):
        return "\n".join(self.errors)

    def __str__(self):
        return self.format_errors()


@dataclass(kw_only=True)
class BaseModel:
    """
    A base dataclass for rows stored in the hosted backend.

    Every table keys its rows by an `id` column, exposed here as `entity_id`.
    Field metadata may carry an `alias` naming the store column a field maps to.
    """

    entity_id: Optional[str] = field(default=None, metadata={'alias': 'id'})
    created_at: Optional[datetime] = None

    @classmethod
    def fields(cls) -> List[str]:
        """
        Get a list of field names for this model.

        Returns:
            List[str]: A list of field names.
        """
        return [f.name for f in fields(cls)]

    @classmethod
    def _build_alias_mapping(cls) -> Dict[str, str]:
        """Build a mapping from store column names to field names."""
        return {f.metadata['alias']: f.name for f in fields(cls) if f.metadata.get('alias')}

    @classmethod
    def _build_field_mapping(cls) -> Dict[str, str]:
        """Build a mapping from field names to store column names."""
        return {f.name: f.metadata.get('alias', f.name) for f in fields(cls)}

    @classmethod
    def _convert_union_type(cls, v: str, args) -> Any:
        for arg in args:
            if arg is type(None):
                continue
            result = cls._convert_from_string(v, arg)
            if result is not v:
                return result
        return v

    @classmethod
    def _convert_from_string(cls, v: str, expected_type) -> Any:
        """Convert string values to enum or datetime types."""
        if get_origin(expected_type) is Union:
            return cls._convert_union_type(v, get_args(expected_type))

        if isinstance(expected_type, type) and issubclass(expected_type, Enum):
            try:
                return expected_type(v)
            except ValueError:
                logger.info("'%s' is not a valid %s.", v, expected_type.__name__)
                return v

        if expected_type is datetime:
            try:
                return isoparse(v)
            except (ValueError, TypeError):
                return v

        return v

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "BaseModel":
        """
        Load a model from a store row. Columns the model does not declare are ignored.
        """
        alias_to_field = cls._build_alias_mapping()
        model_fields = cls.fields()
        hints = get_type_hints(cls)

        clean_data = {}
        for key, value in data.items():
            name = alias_to_field.get(key, key)
            if name not in model_fields:
                continue
            if isinstance(value, str) and hints.get(name):
                value = cls._convert_from_string(value, hints[name])
            clean_data[name] = value

        return cls(**clean_data)

    def as_dict(self, convert_datetime_to_iso_string: bool = False, exclude_none: bool = False) -> Dict[str, Any]:
        """
        Convert this model to a dictionary keyed by store column names.

        Args:
            convert_datetime_to_iso_string (bool): Whether to convert datetime to ISO strings.
            exclude_none (bool): Whether to leave out fields whose value is None.

        Returns:
            Dict[str, Any]: A dictionary representation of this model.
        """
        result = {}
        for name, column in self._build_field_mapping().items():
            value = getattr(self, name)
            if value is None and exclude_none:
                continue
            if isinstance(value, Enum):
                value = value.value
            elif convert_datetime_to_iso_string and isinstance(value, datetime):
                value = value.isoformat()
            result[column] = value
        return result

    def get_for_db(self) -> Dict[str, Any]:
        """
        Return the columns to write on insert. Store-generated columns are left out when unset.
        """
        return self.as_dict(convert_datetime_to_iso_string=True, exclude_none=True)

    def validate(self):
        """
        Validate all fields by calling corresponding `validate_<field_name>` methods if defined.
        Raise `ModelValidationError` if any validations fail.
        """
        errors = []
        for name in self.fields():
            validator = getattr(self, f"validate_{name}", None)
            if callable(validator):
                error = validator()
                if error:
                    errors.append(error)

        if errors:
            raise ModelValidationError(errors)
