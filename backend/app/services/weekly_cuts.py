"""Weekly reconciliation ("corte semanal") of payments into project splits."""

from __future__ import annotations

import logging
from datetime import date, timedelta
from decimal import Decimal
from typing import Iterable, List, Optional, Sequence, Tuple

from .. import models, schemas
from ..errors import NotFoundError, ValidationError
from ..store import CUTS, EntityStore
from .money import to_money
from .payments import PaymentService

LOGGER = logging.getLogger(__name__)

FRIDAY = 4
WINDOW_LENGTH = timedelta(days=7)
WEEKS_PER_MONTH = Decimal("4")
HUNDRED = Decimal("100")
NO_OWNER_LABEL = "Sin dueño"

MONTH_ABBREVIATIONS = (
    "ene",
    "feb",
    "mar",
    "abr",
    "may",
    "jun",
    "jul",
    "ago",
    "sep",
    "oct",
    "nov",
    "dic",
)


def _short_date(value: date, *, with_year: bool = False) -> str:
    label = f"{value.day} {MONTH_ABBREVIATIONS[value.month - 1]}"
    return f"{label} {value.year}" if with_year else label


def _format_pct(value: Decimal) -> str:
    if value == value.to_integral_value():
        return str(int(value))
    return format(value.normalize(), "f")


class WeeklyCutService:
    """Aggregates payments per project for a Friday-to-Thursday window.

    Commission and payable amounts are rounded per project bucket, and the
    window totals are sums of those rounded figures, so every bucket keeps
    ``total == commission + payable`` exactly. Saved cuts are snapshots: they
    are never recomputed, even when payments inside their window change.
    """

    @staticmethod
    def current_window(today: Optional[date] = None) -> Tuple[date, date]:
        today = today or date.today()
        start = today - timedelta(days=(today.weekday() - FRIDAY) % 7)
        return start, start + WINDOW_LENGTH - timedelta(days=1)

    @staticmethod
    def shift_window(start_date: date, weeks: int) -> Tuple[date, date]:
        start = start_date + WINDOW_LENGTH * weeks
        return start, start + WINDOW_LENGTH - timedelta(days=1)

    @staticmethod
    def window_label(start_date: date, end_date: date) -> str:
        return f"{_short_date(start_date)} - {_short_date(end_date, with_year=True)}"

    @staticmethod
    def _project_line(
        project: models.Project, payments: Sequence[models.Payment]
    ) -> models.WeeklyCutLine:
        total = to_money(sum((payment.amount for payment in payments), Decimal("0")))
        commission_pct = Decimal(project.commission_pct or 0)
        commission = to_money(total * commission_pct / HUNDRED)
        return models.WeeklyCutLine(
            project_id=project.id,
            name=project.name,
            owner=project.owner or NO_OWNER_LABEL,
            country=project.country,
            payment_count=len(payments),
            total=total,
            commission_pct=commission_pct,
            commission=commission,
            payable=total - commission,
        )

    @staticmethod
    def _unassigned_line(payments: Sequence[models.Payment]) -> models.WeeklyCutLine:
        total = to_money(sum((payment.amount for payment in payments), Decimal("0")))
        return models.WeeklyCutLine(
            project_id=None,
            name=models.UNASSIGNED_PROJECT_NAME,
            owner=models.UNASSIGNED_OWNER,
            payment_count=len(payments),
            total=total,
            commission_pct=HUNDRED,
            commission=total,
            payable=to_money(0),
        )

    @staticmethod
    def amortized_expenses(store: EntityStore) -> Decimal:
        """Weekly share of the monthly cost of every active panel."""

        weekly = sum(
            (
                Decimal(panel.monthly_cost) / WEEKS_PER_MONTH
                for panel in store.panels.values()
                if panel.status == models.PanelStatus.ACTIVE
            ),
            Decimal("0"),
        )
        return to_money(weekly)

    @classmethod
    def compute(
        cls, store: EntityStore, start_date: date, end_date: Optional[date] = None
    ) -> models.WeeklyCutDraft:
        end_date = end_date or start_date + WINDOW_LENGTH - timedelta(days=1)
        if end_date < start_date:
            raise ValidationError("end_date cannot be before start_date")

        buckets: dict[str, list[models.Payment]] = {}
        unassigned: list[models.Payment] = []
        for payment in PaymentService.payments_between(store, start_date, end_date):
            if payment.project_id:
                buckets.setdefault(payment.project_id, []).append(payment)
            else:
                unassigned.append(payment)

        lines: List[models.WeeklyCutLine] = []
        for project_id, payments in buckets.items():
            project = store.projects.get(project_id)
            if project is None:
                LOGGER.warning(
                    "Skipping %d payments attributed to missing project %s",
                    len(payments),
                    project_id,
                )
                continue
            lines.append(cls._project_line(project, payments))
        if unassigned:
            lines.append(cls._unassigned_line(unassigned))

        total_income = sum((line.total for line in lines), to_money(0))
        total_commission = sum((line.commission for line in lines), to_money(0))
        total_payable = sum((line.payable for line in lines), to_money(0))
        expenses = cls.amortized_expenses(store)

        return models.WeeklyCutDraft(
            start_date=start_date,
            end_date=end_date,
            total_income=total_income,
            total_commission=total_commission,
            total_payable=total_payable,
            amortized_expenses=expenses,
            net_profit=to_money(total_commission - expenses),
            project_lines=lines,
        )

    @classmethod
    def preview(
        cls,
        store: EntityStore,
        start_date: Optional[date] = None,
        *,
        today: Optional[date] = None,
    ) -> schemas.WeeklyCutPreview:
        current_start, _ = cls.current_window(today)
        start = start_date or current_start
        draft = cls.compute(store, start)
        return schemas.WeeklyCutPreview(
            **draft.model_dump(),
            label=cls.window_label(draft.start_date, draft.end_date),
            is_current=start == current_start,
        )

    @classmethod
    def save(
        cls,
        store: EntityStore,
        start_date: Optional[date] = None,
        *,
        notes: Optional[str] = None,
        today: Optional[date] = None,
    ) -> models.WeeklyCut:
        """Persist the cut for the window opening on ``start_date``.

        Saving the same window twice stores two independent records.
        """

        start = start_date or cls.current_window(today)[0]
        if start.weekday() != FRIDAY:
            raise ValidationError("Weekly cuts must start on a Friday")

        cleaned_notes = notes.strip() if notes else None
        with store.transaction(CUTS):
            draft = cls.compute(store, start)
            if not draft.project_lines:
                raise ValidationError("There are no payments in this week")
            cut = models.WeeklyCut(**dict(draft), notes=cleaned_notes or None)
            store.cuts[cut.id] = cut

        LOGGER.info(
            "Saved weekly cut %s for %s..%s: income %s, net %s",
            cut.id,
            cut.start_date,
            cut.end_date,
            cut.total_income,
            cut.net_profit,
        )
        return cut

    @staticmethod
    def _parse_month(month: str) -> Tuple[int, int]:
        try:
            year_str, month_str = month.strip().split("-", maxsplit=1)
            year, month_number = int(year_str), int(month_str)
        except ValueError as exc:
            raise ValidationError("Invalid month format, expected YYYY-MM") from exc
        if month_number < 1 or month_number > 12:
            raise ValidationError("Invalid month format, expected YYYY-MM")
        return year, month_number

    @classmethod
    def list_cuts(
        cls, store: EntityStore, *, month: Optional[str] = None
    ) -> Iterable[models.WeeklyCut]:
        cuts = list(store.cuts.values())
        if month:
            year, month_number = cls._parse_month(month)
            cuts = [
                cut
                for cut in cuts
                if cut.start_date.year == year and cut.start_date.month == month_number
            ]
        return sorted(cuts, key=lambda cut: (cut.start_date, cut.created_at), reverse=True)

    @staticmethod
    def get_cut(store: EntityStore, cut_id: str) -> Optional[models.WeeklyCut]:
        return store.cuts.get(cut_id)

    @staticmethod
    def delete_cut(store: EntityStore, cut_id: str) -> None:
        with store.transaction(CUTS):
            if cut_id not in store.cuts:
                raise NotFoundError("Weekly cut not found")
            del store.cuts[cut_id]

    @classmethod
    def format_summary(cls, cut: models.WeeklyCutDraft, notes: Optional[str] = None) -> str:
        """Render the cut as a WhatsApp-ready text block.

        Sections come in a fixed order: header, one block per project line,
        the summary totals and, when present, the notes.
        """

        lines: List[str] = [
            "✂️ *CORTE SEMANAL*",
            f"📅 {cls.window_label(cut.start_date, cut.end_date)}",
            "",
        ]

        for line in cut.project_lines:
            heading = f"*{line.name.upper()}*"
            if line.owner != models.UNASSIGNED_OWNER:
                country = f" ({line.country})" if line.country else ""
                heading += f" - {line.owner}{country}"
            plural = "" if line.payment_count == 1 else "s"
            lines.append(heading)
            lines.append(f"  {line.payment_count} pago{plural} | Total: ${line.total:.2f}")
            lines.append(
                f"  Tu comisión ({_format_pct(line.commission_pct)}%): ${line.commission:.2f}"
            )
            if line.payable > 0:
                lines.append(f"  Pagar a {line.owner}: ${line.payable:.2f}")
            lines.append("")

        lines.extend(
            [
                "📊 *RESUMEN*",
                f"  Ingresos: ${cut.total_income:.2f}",
                f"  Tu comisión total: ${cut.total_commission:.2f}",
                f"  Gastos semana: -${cut.amortized_expenses:.2f}",
                f"  *GANANCIA NETA: ${cut.net_profit:.2f}*",
            ]
        )

        notes = notes if notes is not None else getattr(cut, "notes", None)
        if notes and notes.strip():
            lines.extend(["", "📝 *Notas*", notes.strip()])

        return "\n".join(lines)
