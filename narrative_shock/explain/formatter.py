"""AlertFormatter: deterministic plain-text rendering of an AlertRecord.

Produces consistent, structured output suitable for logs, APIs, or the
desk notes read by downstream Alert Consumers.  It adds nothing that is
not already in the record.
"""

from __future__ import annotations

from narrative_shock.domain.alert import AlertRecord
from narrative_shock.domain.enums import AlertFlag


class AlertFormatter:

    @staticmethod
    def format_plain(alert: AlertRecord, cycle: int | None = None) -> str:
        header = "Shock monitor"
        if cycle is not None:
            header += f" | cycle {cycle}"
        lines = [header, "=" * 50]

        lines.append(f"STATUS: {alert.flag.value.upper()}")
        if alert.flag.is_episode:
            lines.append(f"Episode: started cycle {alert.start_cycle}, duration {alert.duration}")
        lines.append(f"Score: {alert.score} (detectors: {alert.detection_count})")

        if alert.reasons:
            lines.append("")
            lines.append("Reasons:")
            for reason in alert.reasons:
                lines.append(f"  - {reason}")
        elif alert.flag == AlertFlag.NONE:
            lines.append("No shock conditions.")

        ctx = alert.calendar_context
        if ctx is not None:
            t = ctx.thresholds
            lines.append("")
            lines.append("Calendar:")
            lines.append(f"  Holiday: {ctx.holiday} ({ctx.holiday_priority.value})")
            season = ctx.resolved_seasonal_phase
            if ctx.seasonal_override_active:
                season += " [override]"
            lines.append(f"  Season: {season}")
            if ctx.is_recurring_community_night:
                lines.append("  Community night")
            if ctx.is_quiet_anniversary_day:
                lines.append("  Quiet anniversary")
            lines.append(
                f"  Thresholds: event={t.event_spike_threshold} "
                f"chaos={t.chaos_spike_threshold}/{t.chaos_saturation_threshold} "
                f"migration={t.migration_threshold}"
            )

        return "\n".join(lines)
