"""Chat message formatting for signals and summaries (Telegram Markdown)."""

from datetime import datetime, timedelta, timezone
from decimal import Decimal

from signalcore.models import Action, SignalDecision, SymbolAnalytics

WIB = timezone(timedelta(hours=7), "WIB")
TIME_FORMAT = "%H:%M %d/%m/%Y"

_ACTION_EMOJI = {
    Action.BUY: "🟢",
    Action.SELL: "🔴",
    Action.HOLD: "🟡",
}


def fear_greed_label(index: int) -> str:
    """Human-readable Fear & Greed label."""
    if index <= 20:
        return "Extreme Fear"
    if index <= 40:
        return "Fear"
    if index <= 60:
        return "Neutral"
    if index <= 80:
        return "Greed"
    return "Extreme Greed"


def _price(value: Decimal) -> str:
    return f"{value:.8f}"


def format_signal_message(decision: SignalDecision, quote: str = "USDT") -> str:
    """Render a signal decision as a Markdown chat message."""
    conditions = decision.market_conditions
    lines = [
        "🚨 *CRYPTO SIGNAL* 🚨",
        "",
        f"{_ACTION_EMOJI[decision.action]} *{decision.symbol}/{quote}*",
        f"📈 *Action:* {decision.action.value}",
        f"💵 *Entry Price:* ${_price(decision.entry_price)}",
        f"🎯 *Confidence:* {float(decision.confidence) * 100:.1f}%",
        "",
        "📊 *Analysis:*",
    ]

    if "rsi" in conditions:
        lines.append(f"• RSI: {float(conditions['rsi']):.2f}")
    if "macd_histogram" in conditions:
        status = "Bearish" if conditions["macd_histogram"] < 0 else "Bullish"
        lines.append(f"• MACD: {status}")
    if "fear_greed_index" in conditions:
        index = int(conditions["fear_greed_index"])
        lines.append(f"• Fear & Greed: {index} ({fear_greed_label(index)})")

    if decision.action != Action.HOLD:
        lines += ["", "🎯 *Targets:*"]
        if decision.stop_loss is not None:
            lines.append(f"• Stop Loss: ${_price(decision.stop_loss)}")
        if decision.take_profit_1 is not None:
            lines.append(f"• Take Profit 1: ${_price(decision.take_profit_1)}")
        if decision.take_profit_2 is not None:
            lines.append(f"• Take Profit 2: ${_price(decision.take_profit_2)}")

    if decision.reasoning:
        lines += ["", "💡 *Reasoning:*"]
        lines += [f"• {reason}" for reason in decision.reasoning]

    lines += [
        "",
        f"⏰ {decision.signal_time.astimezone(WIB).strftime(TIME_FORMAT)} WIB",
        "",
        "⚠️ *DYOR - Not Financial Advice*",
    ]
    return "\n".join(lines)


def format_daily_summary(analytics: list[SymbolAnalytics], now: datetime | None = None) -> str | None:
    """Render per-symbol analytics as a daily summary. None when there is nothing to report."""
    if not analytics:
        return None

    now = now or datetime.now(timezone.utc)
    lines = ["📊 *Daily Signal Summary*", ""]

    total_signals = 0
    total_win_rate = Decimal("0")
    total_pnl = Decimal("0")

    for item in analytics:
        if item.total_signals <= 0:
            continue
        lines.append(
            f"*{item.symbol}:* {item.total_signals} signals, "
            f"{float(item.win_rate_percentage):.1f}% win rate, "
            f"{float(item.avg_pnl_percentage):.2f}% avg PnL"
        )
        total_signals += item.total_signals
        total_win_rate += item.win_rate_percentage
        total_pnl += item.avg_pnl_percentage

    if total_signals > 0:
        count = Decimal(len(analytics))
        lines += [
            "",
            f"*Overall:* {total_signals} signals, "
            f"{float(total_win_rate / count):.1f}% avg win rate, "
            f"{float(total_pnl / count):.2f}% avg PnL",
        ]

    lines += ["", f"⏰ {now.astimezone(WIB).strftime(TIME_FORMAT)}"]
    return "\n".join(lines)


def format_performance_update(
    decision: SignalDecision,
    exit_price: Decimal,
    pnl_percentage: Decimal,
    duration_minutes: int,
    now: datetime | None = None,
    quote: str = "USDT",
) -> str:
    """Render the close of a signal: outcome, PnL, duration and entry/exit prices."""
    if pnl_percentage > 0:
        emoji = "✅"
    elif pnl_percentage < 0:
        emoji = "❌"
    else:
        emoji = "⚖️"

    now = now or datetime.now(timezone.utc)
    lines = [
        f"{emoji} *Signal Update*",
        "",
        f"*{decision.symbol}/{quote}* {decision.action.value} signal closed",
        f"💰 *PnL:* {float(pnl_percentage):+.2f}%",
        f"⏱️ *Duration:* {duration_minutes} minutes",
        f"📈 *Entry:* ${_price(decision.entry_price)}",
        f"📉 *Exit:* ${_price(exit_price)}",
        "",
        f"⏰ {now.astimezone(WIB).strftime(TIME_FORMAT)}",
    ]
    return "\n".join(lines)
