# reelpay/infrastructure/config/validators/schema_validator.py
import copy
import logging
from typing import Dict, Any, Tuple, List

import jsonschema


class SchemaValidator:
    """
    Validates configuration data against JSON schemas.
    """
    def __init__(self):
        self.logger = logging.getLogger("infrastructure.config.validator")

    def validate(self, config: Dict[str, Any], schema: Dict[str, Any]) -> Tuple[bool, List[str]]:
        """
        Validate a configuration against a JSON schema.

        Every violation is reported, not just the first one.

        Args:
            config: The configuration dictionary to validate
            schema: The JSON schema to validate against

        Returns:
            Tuple of (is_valid, error_messages)
        """
        try:
            validator_cls = jsonschema.validators.validator_for(schema)
            validator_cls.check_schema(schema)
        except jsonschema.exceptions.SchemaError as e:
            self.logger.error(f"Invalid schema: {e.message}")
            return False, [f"Schema error: {e.message}"]

        errors = []
        for error in sorted(validator_cls(schema).iter_errors(config), key=lambda e: list(e.path)):
            error_path = '.'.join(str(p) for p in error.path) if error.path else 'root'
            errors.append(f"At {error_path}: {error.message}")

        for message in errors:
            self.logger.error(f"Schema validation error: {message}")
        return not errors, errors

    def validate_with_defaults(self, config: Dict[str, Any],
                               schema: Dict[str, Any]) -> Tuple[bool, List[str], Dict[str, Any]]:
        """
        Fill in schema defaults, then validate.

        Args:
            config: The configuration dictionary to validate
            schema: The JSON schema to validate against

        Returns:
            Tuple of (is_valid, error_messages, config_with_defaults)
        """
        updated_config = copy.deepcopy(config)
        self._apply_defaults(updated_config, schema)
        is_valid, errors = self.validate(updated_config, schema)
        return is_valid, errors, updated_config

    def _apply_defaults(self, instance: Any, schema: Dict[str, Any], path: str = "") -> None:
        """Recursively set missing object properties that declare a default."""
        if not isinstance(schema, dict):
            return

        if isinstance(instance, dict):
            for prop_name, prop_schema in schema.get("properties", {}).items():
                if not isinstance(prop_schema, dict):
                    continue
                prop_path = f"{path}.{prop_name}" if path else prop_name
                if prop_name not in instance and "default" in prop_schema:
                    instance[prop_name] = copy.deepcopy(prop_schema["default"])
                    self.logger.debug(f"Applied default value for {prop_path}: {prop_schema['default']}")
                if prop_name in instance:
                    self._apply_defaults(instance[prop_name], prop_schema, prop_path)

        elif isinstance(instance, list) and isinstance(schema.get("items"), dict):
            for i, item in enumerate(instance):
                self._apply_defaults(item, schema["items"], f"{path}[{i}]")
