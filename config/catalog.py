# coding: utf-8
"""
Static tables for the signal bot

Currency pair catalog, result texts, links and media names.
Nothing here changes at runtime.
"""

from typing import Dict, List, Optional, Tuple


# ===========================
# CURRENCY PAIRS
# ===========================

PAIRS_PROMPT = (
    "Choose a currency pair\n\n"
    "If it's not here (almost impossible ;)...), choose a closely similar one "
    "and edit the post after i send it to the channel.\n\n"
)

# (callback value, label shown on the button and used in the post)
CURRENCY_PAIR_PAGES: List[List[Tuple[str, str]]] = [
    [
        ("AED/CNY (OTC)", "🇦🇪 AED / CNY 🇨🇳 (OTC)"),
        ("AUD/CAD (OTC)", "🇦🇺 AUD / CAD 🇨🇦 (OTC)"),
        ("AUD/CHF (OTC)", "🇦🇺 AUD / CHF 🇨🇭 (OTC)"),
        ("AUD/NZD (OTC)", "🇦🇺 AUD / NZD 🇳🇿 (OTC)"),
        ("AUD/USD (OTC)", "🇦🇺 AUD / USD 🇺🇸 (OTC)"),
        ("BHD/CNY (OTC)", "🇧🇭 BHD / CNY 🇨🇳 (OTC)"),
        ("CAD/CHF (OTC)", "🇨🇦 CAD / CHF 🇨🇭 (OTC)"),
        ("CAD/JPY (OTC)", "🇨🇦 CAD / JPY 🇯🇵 (OTC)"),
        ("CHF/JPY (OTC)", "🇨🇭 CHF / JPY 🇯🇵 (OTC)"),
        ("CHF/NOK (OTC)", "🇨🇭 CHF / NOK 🇳🇴 (OTC)"),
        ("EUR/CHF (OTC)", "🇪🇺 EUR / CHF 🇨🇭 (OTC)"),
        ("EUR/GBP (OTC)", "🇪🇺 EUR / GBP 🇬🇧 (OTC)"),
        ("EUR/HUF (OTC)", "🇪🇺 EUR / HUF 🇭🇺 (OTC)"),
        ("EUR/JPY (OTC)", "🇪🇺 EUR / JPY 🇯🇵 (OTC)"),
        ("USD/MXN (OTC)", "🇺🇸 USD / MXN 🇲🇽 (OTC)"),
        ("USD/IDR (OTC)", "🇺🇸 USD / IDR 🇮🇩 (OTC)"),
    ],
    [
        ("EUR/NZD (OTC)", "🇪🇺 EUR / NZD 🇳🇿 (OTC)"),
        ("EUR/RUB (OTC)", "🇪🇺 EUR / RUB 🇷🇺 (OTC)"),
        ("EUR/TRY (OTC)", "🇪🇺 EUR / TRY 🇹🇷 (OTC)"),
        ("EUR/USD (OTC)", "🇪🇺 EUR / USD 🇺🇸 (OTC)"),
        ("GBP/AUD (OTC)", "🇬🇧 GBP / AUD 🇦🇺 (OTC)"),
        ("GBP/JPY (OTC)", "🇬🇧 GBP / JPY 🇯🇵 (OTC)"),
        ("GBP/USD (OTC)", "🇬🇧 GBP / USD 🇺🇸 (OTC)"),
        ("NZD/USD (OTC)", "🇳🇿 NZD / USD 🇺🇸 (OTC)"),
        ("OMR/CNY (OTC)", "🇴🇲 OMR / CNY 🇨🇳 (OTC)"),
        ("SAR/CNY (OTC)", "🇸🇦 SAR / CNY 🇨🇳 (OTC)"),
        ("USD/ARS (OTC)", "🇺🇸 USD / ARS 🇦🇷 (OTC)"),
        ("USD/BDT (OTC)", "🇺🇸 USD / BDT 🇧🇩 (OTC)"),
        ("USD/CNH (OTC)", "🇺🇸 USD / CNH 🇨🇳 (OTC)"),
        ("USD/EGP (OTC)", "🇺🇸 USD / EGP 🇪🇬 (OTC)"),
    ],
    [
        ("USD/MYR (OTC)", "🇺🇸 USD / MYR 🇲🇾 (OTC)"),
        ("USD/PHP (OTC)", "🇺🇸 USD / PHP 🇵🇭 (OTC)"),
        ("USD/RUB (OTC)", "🇺🇸 USD / RUB 🇷🇺 (OTC)"),
        ("USD/THB (OTC)", "🇺🇸 USD / THB 🇹🇭 (OTC)"),
        ("YER/USD (OTC)", "🇾🇪 YER / USD 🇺🇸 (OTC)"),
        ("USD/CAD (OTC)", "🇺🇸 USD / CAD 🇨🇦 (OTC)"),
        ("AUD/JPY (OTC)", "🇦🇺 AUD / JPY 🇯🇵 (OTC)"),
        ("NZD/JPY (OTC)", "🇳🇿 NZD / JPY 🇯🇵 (OTC)"),
        ("TND/USD (OTC)", "🇹🇳 TND / USD 🇺🇸 (OTC)"),
        ("USD/SGD (OTC)", "🇺🇸 USD / SGD 🇸🇬 (OTC)"),
        ("USD/COP (OTC)", "🇺🇸 USD / COP 🇨🇴 (OTC)"),
        ("MAD/USD (OTC)", "🇲🇦 MAD / USD 🇺🇸 (OTC)"),
        ("USD/JPY (OTC)", "🇺🇸 USD / JPY 🇯🇵 (OTC)"),
        ("LBP/USD (OTC)", "🇱🇧 LBP / USD 🇺🇸 (OTC)"),
    ],
    [
        ("JOD/CNY (OTC)", "🇯🇴 JOD / CNY 🇨🇳 (OTC)"),
        ("USD/VND (OTC)", "🇺🇸 USD / VND 🇻🇳 (OTC)"),
        ("USD/PKR (OTC)", "🇺🇸 USD / PKR 🇵🇰 (OTC)"),
        ("QAR/CNY (OTC)", "🇶🇦 QAR / CNY 🇨🇳 (OTC)"),
        ("USD/CLP (OTC)", "🇺🇸 USD / CLP 🇨🇱 (OTC)"),
        ("USD/INR (OTC)", "🇺🇸 USD / INR 🇮🇳 (OTC)"),
        ("USD/BRL (OTC)", "🇺🇸 USD / BRL 🇧🇷 (OTC)"),
        ("USD/CHF (OTC)", "🇺🇸 USD / CHF 🇨🇭 (OTC)"),
        ("USD/DZD (OTC)", "🇺🇸 USD / DZD 🇩🇿 (OTC)"),
        ("NGN/USD (OTC)", "🇳🇬 NGN / USD 🇺🇸 (OTC)"),
        ("ZAR/USD (OTC)", "🇿🇦 ZAR / USD 🇺🇸 (OTC)"),
        ("KES/USD (OTC)", "🇰🇪 KES / USD 🇺🇸 (OTC)"),
        ("UAH/USD (OTC)", "🇺🇦 UAH / USD 🇺🇸 (OTC)"),
    ],
]

PAIR_PAGE_COUNT = len(CURRENCY_PAIR_PAGES)

_PAIR_LABELS: Dict[str, str] = {
    value: label for page in CURRENCY_PAIR_PAGES for value, label in page
}


def get_pair_label(value: str) -> Optional[str]:
    """Label (with flags) for a pair callback value, None if not in the catalog"""
    return _PAIR_LABELS.get(value)


# ===========================
# RESULTS
# ===========================

WIN_MARKER = "WIN"

DIRECT_WIN_TEXT = "✅ WIN⁰ ✅ - Direct WIN 🏆👏"
MARTINGALE_1_WIN_TEXT = "✅ WIN¹ ✅ - Victory in Martingale 1 🫵"
MARTINGALE_2_WIN_TEXT = "✅ WIN² ✅ - Victory in Martingale 2 🫵"
MARTINGALE_3_WIN_TEXT = "✅ WIN³ ✅ - Victory in Martingale 3 🫵"

# What gets stored for a loss, what gets posted, and the caption used
# when a loss goes out with a screenshot
LOSS_STORED_TEXT = "❌ LOSS"
LOSS_POST_TEXT = "❌"
LOSS_IMAGE_CAPTION = "❌"

# Button labels on the /result menu
RESULT_BUTTON_LABELS = {
    "martingale0": "✅ WIN⁰ ✅ - Direct WIN 🏆👏",
    "martingale1": "✅ WIN¹ ✅ - Victory in Martingale 1 ☝",
    "martingale2": "✅ WIN² ✅ - Victory in Martingale 2 ☝",
    "martingale3": "✅ WIN³ ✅ - Victory in Martingale 3 ☝",
    "lossBoth": "LOSS ❌",
}


# ===========================
# SESSIONS
# ===========================

SESSION_ICONS = {
    "OVERNIGHT": "🌑",
    "MORNING": "🌙",
    "AFTERNOON": "☀",
}

SESSION_TITLES = {
    "OVERNIGHT": "OVERNIGHT SESSION",
    "MORNING": "MORNING SESSION",
    "AFTERNOON": "AFTERNOON SESSION",
}

MILESTONES = [50, 100, 250, 500, 750, 1000, 1500, 2000, 2500, 3000, 5000, 10000]


# ===========================
# LINKS
# ===========================

TELEGRAM_CHANNEL_URL = "https://t.me/gudtradewithmatthew"
TELEGRAM_CHANNEL_HANDLE = "@ɢᴜᴅᴛʀᴀᴅᴇᴡɪᴛʜᴍᴀᴛᴛʜᴇᴡ"
BROKER_URL = (
    "https://u3.shortink.io/register?utm_campaign=788587&utm_source=affiliate"
    "&utm_medium=sr&a=3pbc0P7XCrDr8e&ac=zik&code=50START"
)
SUPPORT_URL = "https://t.me/twmsupports"
TRADING_GUIDE_URL = (
    "https://telegra.ph/STRICT-INSTRUCTIONS-ON-HOW-TO-TRADE-SUCCESSFULLY-02-09"
)

# (text, url) rows under the session end report
SESSION_END_BUTTONS = [
    ("CREATE AN ACCOUNT HERE", BROKER_URL),
    ("OPEN BROKER HERE", BROKER_URL),
    ("CONTACT SUPPORT HERE", SUPPORT_URL),
]

DAY_END_BUTTONS = [
    ("SHARE TESTIMONY", SUPPORT_URL),
    ("LEARN HOW TO TRADE", TRADING_GUIDE_URL),
]


# ===========================
# MEDIA
# ===========================

# Scheduled post id -> brand image filename (under MEDIA_DIR/imgs/brand)
BRAND_IMAGES = {
    "gen_info_night": "gen_info_night.jpg",
    "gen_info_morning": "gen_info_morning.jpg",
    "gen_info_noon": "gen_info_noon.jpg",
    "get_ready": "get_ready.jpg",
    "session_end": "session_end.jpg",
}

# Instructional video attached to every video post (under MEDIA_DIR/videos)
INSTRUCTION_VIDEO = {
    "width": 622,
    "height": 1280,
    "path": "brand/TWM_Video_Instructions.mp4",
}
