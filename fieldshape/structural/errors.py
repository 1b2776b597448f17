# fieldshape/structural/errors.py

class FieldSchemaError(ValueError):
    """Base class for problems found in a field schema."""

    tag = "SCHEMA"

    def __init__(self, message: str, path: str = ""):
        super().__init__(message)
        self.path = path


class CircularFieldError(FieldSchemaError):
    """A field is reached again while it is still needed for its own default value."""

    tag = "CYCLE"

    def __init__(self, path: str):
        super().__init__(
            f'The field at "{path}" is a field that is also its ancestor, '
            "this is not allowed because it would create an infinitely recursive structure. "
            "Introduce an array or conditional field to represent recursive structure.",
            path,
        )


class UnstableFieldError(FieldSchemaError):
    """An object field accessor returned different fields on consecutive reads."""

    tag = "STABILITY"

    def __init__(self, path: str):
        super().__init__(
            "Fields on an object field must not change over time "
            f'but the field at "{path}" changes between accesses',
            path,
        )


class UnknownListError(FieldSchemaError):
    """A relationship field names a list that does not exist."""

    tag = "RELATIONSHIP"

    def __init__(self, path: str, list_key: str):
        # the double space before "has" is part of the established message
        super().__init__(
            f'The relationship field at "{path}"  has the listKey "{list_key}" '
            f'but no list named "{list_key}" exists.',
            path,
        )
        self.list_key = list_key


class FieldConfigurationError(FieldSchemaError):
    """A field was constructed with inconsistent options."""

    tag = "CONFIG"


class SchemaDocumentError(FieldSchemaError):
    """A declarative schema document is malformed or cannot be built."""

    tag = "DOCUMENT"
