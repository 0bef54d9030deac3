"""Unit tests for Rich formatting helpers."""

from rich.table import Table

from sweepctl.core.decider import CandidateOutcome, OutcomeStatus
from sweepctl.core.errors import EntityLookupError, PerEntityApplyError
from sweepctl.models.action import PurgeAction
from sweepctl.models.decision import KeepReason
from sweepctl.models.entity import EntityKind
from sweepctl.utils.formatting import create_outcome_table, format_outcome_row


class TestCreateOutcomeTable:
    """Tests for create_outcome_table function."""

    def test_columns(self) -> None:
        """The table has one column per row field."""
        table = create_outcome_table()

        assert isinstance(table, Table)
        assert table.title == "Purge Plan"
        assert [c.header for c in table.columns] == ["Kind", "Name", "Id", "Decision", "Note"]

    def test_custom_title(self) -> None:
        """The title can be overridden."""
        assert create_outcome_table("Planned Purges").title == "Planned Purges"


class TestFormatOutcomeRow:
    """Tests for format_outcome_row function."""

    def test_kept_row(self) -> None:
        """Kept rows show the keep reason."""
        outcome = CandidateOutcome(
            name="oldteam",
            kind=EntityKind.GROUP,
            status=OutcomeStatus.KEPT,
            entity_id=1500,
            reason=KeepReason.EXCLUDED_BY_ID,
        )

        assert format_outcome_row(outcome) == (
            "group",
            "[kept]oldteam[/]",
            "1500",
            "[kept]kept[/]",
            "excluded by id",
        )

    def test_purge_row_noop(self) -> None:
        """Noop purges are marked as such."""
        action = PurgeAction(name="bob", kind=EntityKind.USER, entity_id=1001, noop=True)
        outcome = CandidateOutcome(
            name="bob",
            kind=EntityKind.USER,
            status=OutcomeStatus.PURGE,
            entity_id=1001,
            action=action,
        )

        row = format_outcome_row(outcome)

        assert row[3] == "[purge]purge[/]"
        assert row[4] == "noop"

    def test_declared_row_without_id(self) -> None:
        """Unresolved ids are shown as a dash."""
        outcome = CandidateOutcome(
            name="alice", kind=EntityKind.USER, status=OutcomeStatus.DECLARED
        )

        row = format_outcome_row(outcome)

        assert row[2] == "-"
        assert row[4] == "-"

    def test_error_row(self) -> None:
        """Error rows show the underlying cause."""
        cause = EntityLookupError("Cannot resolve id of group 'broken'")
        outcome = CandidateOutcome(
            name="broken",
            kind=EntityKind.GROUP,
            status=OutcomeStatus.ERROR,
            error=PerEntityApplyError("broken", EntityKind.GROUP, cause),
        )

        row = format_outcome_row(outcome)

        assert row[1] == "[error]broken[/]"
        assert row[4] == "Cannot resolve id of group 'broken'"

    def test_name_markup_escaped(self) -> None:
        """Names that look like markup are escaped."""
        outcome = CandidateOutcome(
            name="[bold]x", kind=EntityKind.USER, status=OutcomeStatus.DECLARED
        )

        assert format_outcome_row(outcome)[1] == "[declared]\\[bold]x[/]"
