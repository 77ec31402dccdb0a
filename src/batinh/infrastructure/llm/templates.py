"""Jinja2 template utilities for LLM components."""

from jinja2 import Environment, PackageLoader, select_autoescape

from batinh.domain.entities import Star


def format_phone(phone_number: str) -> str:
    """Group a phone number as 4-3-3 (10 digits) or 4-3-4 (11 digits).

    Args:
        phone_number: Normalized digit string.

    Returns:
        Grouped number, e.g. "0912 345 678". Other lengths are returned as is.
    """
    if len(phone_number) not in (10, 11):
        return phone_number
    return f"{phone_number[:4]} {phone_number[4:7]} {phone_number[7:]}"


def star_name(star: Star | str) -> str:
    """Return a star's display name."""
    return Star(star).display_name


def create_jinja_env() -> Environment:
    """Create Jinja2 environment for LLM templates.

    Creates a configured Jinja2 environment that loads templates from
    the batinh.infrastructure.llm.templates package.

    Returns:
        Configured Jinja2 environment.
    """
    env = Environment(
        loader=PackageLoader("batinh.infrastructure.llm", "templates"),
        autoescape=select_autoescape(),
        trim_blocks=True,
        lstrip_blocks=True,
    )
    env.filters["format_phone"] = format_phone
    env.filters["star_name"] = star_name
    return env
