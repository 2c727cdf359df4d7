from pydantic import BaseModel
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """JSON uses camelCase keys; Python code keeps snake_case attribute names."""

    class Config:
        alias_generator = to_camel
        populate_by_name = True
        from_attributes = True


class StatusResponse(BaseModel):
    status: str


def describe_errors(errors) -> str:
    """Flatten pydantic error dicts into one human readable reason."""
    parts = []
    for err in errors:
        loc = ".".join(str(p) for p in err.get("loc", ()) if p not in ("body", "query", "path"))
        msg = err.get("msg", "invalid value")
        parts.append(f"{loc}: {msg}" if loc else msg)
    return "; ".join(parts) or "Invalid request"


def not_null(v):
    # present-but-null is not a valid way to clear a versioned field
    if v is None:
        raise ValueError("must not be null")
    return v
