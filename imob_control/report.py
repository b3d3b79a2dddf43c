"""Plain-text rendering of the dashboard."""

from datetime import date, datetime
from decimal import Decimal

from imob_control.analytics import AggregationResult
from imob_control.dates import format_date


def format_brl(value: Decimal) -> str:
    """Format an amount as ``R$ 1.234,56``."""
    sign = "-" if value < 0 else ""
    text = f"{abs(value):,.2f}".replace(",", "_").replace(".", ",").replace("_", ".")
    return f"{sign}R$ {text}"


def format_percent(value: float) -> str:
    return f"{value:.1f}%".replace(".", ",")


def render_report(
    result: AggregationResult,
    title: str = "Relatório Financeiro",
    max_records: int | None = None,
    generated_at: datetime | None = None,
    filtered_start: date | None = None,
    filtered_end: date | None = None,
) -> str:
    """Render the dashboard as text.

    Parameters
    ----------
    result : AggregationResult
        Aggregation to render.
    title : str
        Report heading.
    max_records : int | None
        Maximum rows in the detailed table (None for all).
    generated_at : datetime | None
        Timestamp printed in the header.
    filtered_start, filtered_end : date | None
        Financial filter bounds as chosen by the user, for the header.
    """
    generated_at = generated_at or datetime.now()
    lines = [
        "=" * 60,
        title,
        f"Gerado em: {generated_at.strftime('%d/%m/%Y às %H:%M:%S')}",
        "Período: {} até {}".format(
            format_date(filtered_start) if filtered_start else "Início",
            format_date(filtered_end) if filtered_end else "Hoje",
        ),
        f"Imóveis: {result.property_count}",
        "=" * 60,
        f"Receita total:    {format_brl(result.total_revenue)}",
        f"Despesa total:    {format_brl(result.total_expense)}",
        f"Resultado líquido: {format_brl(result.net_result)}",
        "",
        "Ocupação ({} a {}): {}".format(
            format_date(result.period_start),
            format_date(result.period_end),
            format_percent(result.occupancy_rate),
        ),
        f"  Dias ocupados: {result.occupied_days}",
        f"  Dias vagos:    {result.vacant_days}",
        "",
        "Evolução mensal:",
    ]

    if result.monthly:
        for bucket in result.monthly:
            lines.append(
                f"  {bucket.key:>8}  Receita {format_brl(bucket.revenue):>16}"
                f"  Despesa {format_brl(bucket.expense):>16}"
            )
    else:
        lines.append("  (sem lançamentos)")

    lines.append("")
    lines.append(f"Lançamentos ({len(result.records)}):")
    rows = result.records[:max_records] if max_records else result.records
    for row in rows:
        record = row.record
        sign = "-" if record.is_expense else "+"
        lines.append(
            f"  {record.date or '--/--/----':>10}  {row.property_title[:24]:<24}  "
            f"{record.description[:24]:<24}  {sign} {format_brl(record.amount)}"
        )
    if max_records and len(result.records) > max_records:
        lines.append(f"  ... e mais {len(result.records) - max_records} lançamentos")

    return "\n".join(lines)
