"""CLI argument parsing and parameter conversion utilities."""

from __future__ import annotations

from typing import Any


def join_command(tokens: tuple[Any, ...] | list[Any]) -> str | None:
    """Join trailing positional tokens into the remote command.

    Fire converts numeric tokens to numbers, so every token is turned back
    into a string.

    Parameters
    ----------
    tokens : tuple[Any, ...] | list[Any]
        Positional arguments after the subcommand

    Returns
    -------
    str | None
        Space-joined command, or None when no tokens were given
    """
    command = " ".join(str(token) for token in tokens).strip()
    return command or None


def parse_optional_str(value: Any) -> str | None:
    """Convert a Fire flag value to a string, keeping None and empty as None.

    Parameters
    ----------
    value : Any
        Flag value; Fire may hand over ints or floats for numeric input

    Returns
    -------
    str | None
        String value or None
    """
    if value is None or value is False:
        return None
    text = str(value).strip()
    return text or None


def parse_bool(value: Any) -> bool | None:
    """Parse a boolean flag that may arrive as a string.

    Parameters
    ----------
    value : Any
        ``True``/``False``, ``"true"``/``"false"`` or None

    Returns
    -------
    bool | None
        Parsed value, None when unset

    Raises
    ------
    ValueError
        If a string value is not "true" or "false"
    """
    if value is None or isinstance(value, bool):
        return value

    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered not in ("true", "false"):
            raise ValueError(f"expected 'true' or 'false', got: {value}")
        return lowered == "true"

    raise ValueError(f"Unexpected type for boolean flag: {type(value)}")


__all__ = ["join_command", "parse_optional_str", "parse_bool"]
