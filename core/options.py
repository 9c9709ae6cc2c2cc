"""Options consumed by the tree pipeline."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field, ValidationError, field_validator

from core.errors import ConfigurationError


class TreeOptions(BaseModel):
    """Everything the CLI (or config file) can tune for one run."""

    targets: list[str] = Field(default_factory=list)
    format: str = "term"
    hide_completed: bool = False
    depth: int = 0
    separator: str = "\n"
    no_color: bool = False
    auto_add: bool = False
    hide_comment: bool = False
    hide_owner: bool = False
    owners: list[str] = Field(default_factory=list)
    reverse: bool = False
    width: int = Field(default=0, ge=0)

    @field_validator("format")
    @classmethod
    def _normalize_format(cls, value: str) -> str:
        return value.strip().lower() or "term"

    @field_validator("owners", "targets")
    @classmethod
    def _drop_blank(cls, value: list[str]) -> list[str]:
        return [item.strip() for item in value if item.strip()]

    @classmethod
    def build(cls, base: dict[str, Any] | None = None, **overrides: Any) -> TreeOptions:
        """Validate config values plus explicit overrides (``None`` means unset)."""
        data = dict(base or {})
        data.update({key: value for key, value in overrides.items() if value is not None})
        try:
            return cls.model_validate(data)
        except ValidationError as exc:
            problems = "; ".join(
                f"{'.'.join(str(part) for part in err['loc']) or 'options'}: {err['msg']}"
                for err in exc.errors()
            )
            raise ConfigurationError(f"invalid options: {problems}") from exc
