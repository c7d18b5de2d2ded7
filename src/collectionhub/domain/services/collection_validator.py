"""Collection validation service.

Provides validation for collection titles, descriptions and membership
list sizes. Validation runs before any statement executes.
"""

from collectionhub.core.exceptions import FieldError, ValidationFailedError


class CollectionValidator:
    """Validator for collection create and edit requests."""

    MIN_TITLE_LENGTH = 3
    MAX_TITLE_LENGTH = 64

    MIN_DESCRIPTION_LENGTH = 3
    MAX_DESCRIPTION_LENGTH = 255

    MAX_INITIAL_PROJECTS = 32
    MAX_EDIT_PROJECTS = 64

    @classmethod
    def validate_title(cls, title: str) -> list[FieldError]:
        """Validate a collection title.

        Args:
            title: The title to validate.

        Returns:
            List of validation errors (empty if valid).
        """
        errors = []

        if not title or not title.strip():
            errors.append(
                FieldError(
                    field="title",
                    message="Name cannot contain only whitespace.",
                    code="title_blank",
                )
            )
            return errors

        if len(title) < cls.MIN_TITLE_LENGTH:
            errors.append(
                FieldError(
                    field="title",
                    message=f"Title must be at least {cls.MIN_TITLE_LENGTH} characters",
                    code="title_too_short",
                )
            )

        if len(title) > cls.MAX_TITLE_LENGTH:
            errors.append(
                FieldError(
                    field="title",
                    message=f"Title must be at most {cls.MAX_TITLE_LENGTH} characters",
                    code="title_too_long",
                )
            )

        return errors

    @classmethod
    def validate_description(cls, description: str) -> list[FieldError]:
        """Validate a collection description."""
        length = len(description or "")
        if length < cls.MIN_DESCRIPTION_LENGTH or length > cls.MAX_DESCRIPTION_LENGTH:
            return [
                FieldError(
                    field="description",
                    message=(
                        f"Description must be between {cls.MIN_DESCRIPTION_LENGTH} "
                        f"and {cls.MAX_DESCRIPTION_LENGTH} characters"
                    ),
                    code="description_length",
                )
            ]
        return []

    @classmethod
    def validate_projects(cls, project_ids: list[str], limit: int) -> list[FieldError]:
        """Validate the size of a submitted membership list."""
        if len(project_ids) > limit:
            return [
                FieldError(
                    field="projects",
                    message=f"A collection may reference at most {limit} projects",
                    code="too_many_projects",
                )
            ]
        return []

    @classmethod
    def validate_create(
        cls, title: str, description: str, project_ids: list[str]
    ) -> list[FieldError]:
        """Validate a create request."""
        return (
            cls.validate_title(title)
            + cls.validate_description(description)
            + cls.validate_projects(project_ids, cls.MAX_INITIAL_PROJECTS)
        )

    @classmethod
    def validate_edit(
        cls,
        title: str | None = None,
        description: str | None = None,
        project_ids: list[str] | None = None,
    ) -> list[FieldError]:
        """Validate the fields present in an edit request."""
        errors: list[FieldError] = []
        if title is not None:
            errors.extend(cls.validate_title(title))
        if description is not None:
            errors.extend(cls.validate_description(description))
        if project_ids is not None:
            errors.extend(cls.validate_projects(project_ids, cls.MAX_EDIT_PROJECTS))
        return errors

    @classmethod
    def ensure_valid(cls, errors: list[FieldError]) -> None:
        """Raise ``ValidationFailedError`` if ``errors`` is not empty."""
        if errors:
            raise ValidationFailedError(errors)
