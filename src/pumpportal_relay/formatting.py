"""Message templates for feed events and the /list command.

Renderers are pure functions of the payload mapping. Upstream field
presence is not guaranteed, so every field is looked up with a
placeholder: a value that is missing or falsy (None, empty string, zero)
renders as ``Unknown`` or ``N/A`` depending on the field.

Display values are escaped for Telegram's legacy Markdown parse mode;
link targets are left untouched.
"""

from typing import Dict, List, Any, Callable, Mapping

from .events.envelope import EventCategory
from .history import HistoryStore


UNKNOWN = "Unknown"
NOT_AVAILABLE = "N/A"
NO_LINK = "#"

SOLSCAN_ADDRESS_URL = "https://solscan.io/address/{}"
SOLSCAN_TX_URL = "https://solscan.io/tx/{}"

_MARKDOWN_SPECIAL = ('_', '*', '`', '[')


def escape_markdown(text: str) -> str:
    """Escape characters that legacy Telegram Markdown treats as markup."""
    for char in _MARKDOWN_SPECIAL:
        text = text.replace(char, '\\' + char)
    return text


def field_text(payload: Mapping[str, Any], key: str, default: str = UNKNOWN) -> str:
    """Display text for a payload field, or the placeholder when missing."""
    value = payload.get(key)
    if not value:
        return default
    return escape_markdown(str(value))


def field_url(payload: Mapping[str, Any], key: str, template: str = "{}") -> str:
    """Link target for a payload field, or ``#`` when missing."""
    value = payload.get(key)
    if not value:
        return NO_LINK
    return template.format(value)


def render_new_token(payload: Mapping[str, Any]) -> str:
    """Render a token creation event."""
    return (
        "🎉 *New Token Created on PumpPortal!*\n\n"
        f"🪙 *Name*: {field_text(payload, 'name')}\n"
        f"💠 *Symbol*: {field_text(payload, 'symbol')}\n"
        f"💵 *Market Cap (in SOL)*: {field_text(payload, 'marketCapSol', NOT_AVAILABLE)}\n"
        f"💰 *Initial Buy Amount*: {field_text(payload, 'initialBuy', NOT_AVAILABLE)} SOL\n"
        f"🔗 *Token Mint*: [{field_text(payload, 'mint')}]"
        f"({field_url(payload, 'mint', SOLSCAN_ADDRESS_URL)})\n"
        f"📜 *Transaction Signature*: [{field_text(payload, 'signature')}]"
        f"({field_url(payload, 'signature', SOLSCAN_TX_URL)})\n"
        f"🌐 *Token URI*: [View Metadata]({field_url(payload, 'uri')})\n"
    )


def render_raydium_liquidity(payload: Mapping[str, Any]) -> str:
    """Render a Raydium liquidity (migration) event."""
    return (
        "*New Liquidity Event:*\n\n"
        f"🪙 *Token Name*: {field_text(payload, 'name')} ({field_text(payload, 'symbol')})\n"
        f"💰 *Amount of SOL*: {field_text(payload, 'solAmount', NOT_AVAILABLE)}\n"
        f"🛠 *Initial Buy Amount*: {field_text(payload, 'initialBuy', NOT_AVAILABLE)}\n"
        f"📊 *Market Cap in SOL*: {field_text(payload, 'marketCapSol', NOT_AVAILABLE)}\n\n"
        f"🔗 *Transaction Type*: {field_text(payload, 'txType')}\n"
        f"🧑‍💼 *Trader Public Key*: {field_text(payload, 'traderPublicKey')}\n"
        f"🔑 *Mint Address*: {field_text(payload, 'mint')}\n"
        f"🌐 *URI*: [Token Metadata]({field_url(payload, 'uri')})\n\n"
        "📊 *Liquidity in Bonding Curve:*\n"
        f"- Tokens: {field_text(payload, 'vTokensInBondingCurve', NOT_AVAILABLE)}\n"
        f"- SOL: {field_text(payload, 'vSolInBondingCurve', NOT_AVAILABLE)}\n\n"
        f"🏊‍♂️ *Pool*: {field_text(payload, 'pool')}\n"
        f"🔒 *Signature*: {field_text(payload, 'signature')}"
    )


RENDERERS: Dict[EventCategory, Callable[[Mapping[str, Any]], str]] = {
    EventCategory.NEW_TOKEN: render_new_token,
    EventCategory.RAYDIUM_LIQUIDITY: render_raydium_liquidity,
}

# (category, section title, empty-section text) in /list order
LISTING_SECTIONS = [
    (EventCategory.NEW_TOKEN, "Token Listings", "No recent token listings found."),
    (EventCategory.RAYDIUM_LIQUIDITY, "Liquidity Events", "No recent liquidity events found."),
]


TELEGRAM_MESSAGE_LIMIT = 4096


def split_message(text: str, limit: int = TELEGRAM_MESSAGE_LIMIT) -> List[str]:
    """Split text on blank lines into chunks no longer than ``limit``.

    A single paragraph longer than the limit is hard-wrapped.
    """
    chunks: List[str] = []
    current = ""
    for paragraph in text.split("\n\n"):
        while len(paragraph) > limit:
            if current:
                chunks.append(current)
                current = ""
            chunks.append(paragraph[:limit])
            paragraph = paragraph[limit:]

        candidate = f"{current}\n\n{paragraph}" if current else paragraph
        if len(candidate) <= limit:
            current = candidate
        else:
            chunks.append(current)
            current = paragraph

    if current.strip():
        chunks.append(current)
    return chunks


def format_history_listing(history: HistoryStore) -> str:
    """Render the /list reply: an enumerated, 1-indexed list per category."""
    message = ""
    for category, title, empty_text in LISTING_SECTIONS:
        message += f"*Last {history.capacity} {title}:*\n\n"
        entries = history.snapshot(category)
        if entries:
            for index, entry in enumerate(entries, 1):
                message += f"{index}. {entry}\n\n"
        else:
            message += f"{empty_text}\n\n"
    return message
