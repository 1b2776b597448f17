# fieldshape/loader/schema.py
# Shape of a declarative field schema document (JSON or YAML).

_LABEL = {"type": "string"}

FIELD_DOCUMENT_SCHEMA = {
    "type": "object",
    "required": ["root", "fields"],
    "properties": {
        # Names relationship fields may point at
        "lists": {
            "type": "array",
            "items": {"type": "string", "minLength": 1},
            "uniqueItems": True
        },
        "root": {"type": "string", "minLength": 1},
        "fields": {
            "type": "object",
            "minProperties": 1,
            "additionalProperties": {"$ref": "#/definitions/field"}
        }
    },
    "additionalProperties": False,

    "definitions": {
        "field": {
            "oneOf": [
                {"$ref": "#/definitions/ref"},
                {"$ref": "#/definitions/form"},
                {"$ref": "#/definitions/select"},
                {"$ref": "#/definitions/relationship"},
                {"$ref": "#/definitions/object"},
                {"$ref": "#/definitions/array"},
                {"$ref": "#/definitions/conditional"}
            ]
        },

        # Reference to a named field; read lazily under object keys and
        # conditional values, eagerly everywhere else
        "ref": {
            "type": "object",
            "required": ["ref"],
            "properties": {"ref": {"type": "string", "minLength": 1}},
            "additionalProperties": False
        },

        "form": {
            "type": "object",
            "required": ["kind"],
            "properties": {
                "kind": {"enum": ["text", "integer", "url", "checkbox", "empty"]},
                "label": _LABEL,
                "default": {}
            },
            "additionalProperties": False
        },

        "select": {
            "type": "object",
            "required": ["kind", "options", "default"],
            "properties": {
                "kind": {"const": "select"},
                "label": _LABEL,
                "options": {
                    "type": "array",
                    "minItems": 1,
                    "items": {
                        "type": "object",
                        "required": ["label", "value"],
                        "properties": {
                            "label": {"type": "string"},
                            "value": {"type": ["string", "number", "boolean"]}
                        },
                        "additionalProperties": False
                    }
                },
                "default": {"type": ["string", "number", "boolean"]}
            },
            "additionalProperties": False
        },

        "relationship": {
            "type": "object",
            "required": ["kind", "listKey"],
            "properties": {
                "kind": {"const": "relationship"},
                "listKey": {"type": "string", "minLength": 1},
                "label": _LABEL,
                "many": {"type": "boolean"}
            },
            "additionalProperties": False
        },

        "object": {
            "type": "object",
            "required": ["kind", "fields"],
            "properties": {
                "kind": {"const": "object"},
                "fields": {
                    "type": "object",
                    "additionalProperties": {"$ref": "#/definitions/field"}
                }
            },
            "additionalProperties": False
        },

        "array": {
            "type": "object",
            "required": ["kind", "element"],
            "properties": {
                "kind": {"const": "array"},
                "element": {"$ref": "#/definitions/field"}
            },
            "additionalProperties": False
        },

        "conditional": {
            "type": "object",
            "required": ["kind", "discriminant", "values"],
            "properties": {
                "kind": {"const": "conditional"},
                # Small finite domain only
                "discriminant": {
                    "oneOf": [
                        {
                            "type": "object",
                            "required": ["kind"],
                            "properties": {
                                "kind": {"const": "checkbox"},
                                "label": _LABEL,
                                "default": {"type": "boolean"}
                            },
                            "additionalProperties": False
                        },
                        {"$ref": "#/definitions/select"}
                    ]
                },
                "values": {
                    "type": "object",
                    "minProperties": 1,
                    "additionalProperties": {"$ref": "#/definitions/field"}
                }
            },
            "additionalProperties": False
        }
    }
}
