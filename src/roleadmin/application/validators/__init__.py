"""Form validators that need repository access."""

from roleadmin.application.validators.role_form_validator import RoleFormValidator

__all__ = ["RoleFormValidator"]
