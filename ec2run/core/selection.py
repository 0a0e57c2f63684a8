"""Instance disambiguation: auto-pick, single match, or operator prompt."""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from datetime import datetime, timezone

from ec2run.exceptions import SelectionError, SelectionReason
from ec2run.models import InstanceRecord
from ec2run.utils import format_uptime, truncate_name

logger = logging.getLogger(__name__)

TABLE_HEADERS = ("#", "NAME", "ID", "TYPE", "UPTIME", "ROLES")

SELECT_PROMPT = "Select instance: [0] "


def sort_by_launch_time(instances: Sequence[InstanceRecord]) -> list[InstanceRecord]:
    """Sort oldest first, keeping discovery order for equal launch times."""
    return sorted(instances, key=lambda instance: instance.launch_time)


def render_table(instances: Sequence[InstanceRecord], now: datetime) -> str:
    """Render the candidates as a 0-indexed table.

    Parameters
    ----------
    instances : Sequence[InstanceRecord]
        Candidates in selection order
    now : datetime
        Reference time for the uptime column

    Returns
    -------
    str
        Table with a header row, one row per instance
    """
    rows = [TABLE_HEADERS] + [
        (
            str(index),
            truncate_name(instance.name),
            instance.instance_id,
            instance.instance_type,
            format_uptime(instance.uptime_hours(now)),
            instance.roles,
        )
        for index, instance in enumerate(instances)
    ]
    widths = [max(len(row[col]) for row in rows) for col in range(len(TABLE_HEADERS))]

    return "\n".join(
        "  ".join(cell.ljust(width) for cell, width in zip(row, widths)).rstrip()
        for row in rows
    )


def parse_selection(text: str | None, count: int) -> int:
    """Turn the operator's answer into an index.

    Parameters
    ----------
    text : str | None
        Raw line typed by the operator, None on end of input
    count : int
        Number of candidates

    Returns
    -------
    int
        Selected index; an empty answer selects 0

    Raises
    ------
    SelectionError
        If the answer is not a number or is outside ``[0, count)``
    """
    if text is None:
        raise SelectionError(SelectionReason.INVALID_INPUT, "no selection was entered.")

    text = text.strip()
    if not text:
        return 0

    try:
        selection = int(text)
    except ValueError:
        raise SelectionError(
            SelectionReason.INVALID_INPUT,
            f"unable to convert selection '{text}' to a number.",
        ) from None

    if selection < 0 or selection >= count:
        raise SelectionError(
            SelectionReason.INVALID_INPUT,
            f"index {selection} out of range (0-{count - 1}).",
        )

    return selection


class InstanceSelector:
    """Resolve a set of candidate instances to exactly one.

    Parameters
    ----------
    input_func : Callable[[str], str] | None
        Prompt function, defaults to ``input``
    output_func : Callable[[str], None] | None
        Function printing tables and status lines, defaults to ``print``
    clock : Callable[[], datetime] | None
        Returns the current time, used for uptimes
    verbose : bool
        Show the table even when the oldest instance is picked automatically
    """

    def __init__(
        self,
        input_func: Callable[[str], str] | None = None,
        output_func: Callable[[str], None] | None = None,
        clock: Callable[[], datetime] | None = None,
        verbose: bool = False,
    ) -> None:
        self.input_func = input_func or input
        self.output_func = output_func or print
        self.clock = clock or (lambda: datetime.now(timezone.utc))
        self.verbose = verbose

    def select(
        self,
        instances: Sequence[InstanceRecord],
        auto_yes: bool,
        matcher: str | None = None,
    ) -> tuple[InstanceRecord, int]:
        """Select one instance.

        Parameters
        ----------
        instances : Sequence[InstanceRecord]
            Candidates in discovery order
        auto_yes : bool
            Pick the oldest candidate without prompting
        matcher : str | None
            Stack matcher, used in messages

        Returns
        -------
        tuple[InstanceRecord, int]
            Selected instance and its index in launch-time order

        Raises
        ------
        SelectionError
            If there are no candidates or the operator's answer is invalid
        """
        label = matcher or "the stack"

        if not instances:
            raise SelectionError(
                SelectionReason.NONE_FOUND,
                f"No instances matched '{label}'.",
            )

        if len(instances) == 1:
            self.output_func(f"Found 1 instance matching '{label}'.")
            return instances[0], 0

        candidates = sort_by_launch_time(instances)
        self.output_func(f"Found {len(candidates)} instances matching '{label}':")

        if not auto_yes or self.verbose:
            self.output_func("")
            self.output_func(render_table(candidates, self.clock()))

        if auto_yes:
            self.output_func(f"Automatically selected {candidates[0].label}")
            return candidates[0], 0

        try:
            answer = self.input_func(SELECT_PROMPT)
        except EOFError:
            answer = None

        index = parse_selection(answer, len(candidates))
        logger.debug("Operator selected index %d (%s)", index, candidates[index].instance_id)
        return candidates[index], index
