# Tumbling tariff rules: pass legality + per-track bonus tables

# ------------------------------
# 1. Legality
# ------------------------------
MAX_BACK_FULLS_PER_PASS = 3

# Message text per rule, keyed by language
MESSAGES = {
    "intra_repeat": {
        "he": "חזרה על אלמנט בתוך הפס",
        "en": "Element repeated in pass",
    },
    "back_full_cap": {
        "he": "מותר עד 3 ברגים אחורה בפס",
        "en": "Max 3 back fulls per pass",
    },
    "cross_repeat": {
        "he": "חזרה על אלמנט בין פס 1 לפס 2",
        "en": "Element repeated across passes",
    },
    "double_back_full_ending": {
        "he": "רק אחד מהפסים יכול להסתיים ב״בורג אחורה״",
        "en": "Only one pass may end with Back Full",
    },
    "back_handspring_into_forward": {
        "he": "פליק פלאק לאלמנט קדימה",
        "en": "Flick/Back Handspring into forward element",
    },
    "tempo_into_forward": {
        "he": "טמפו לאלמנט קדימה",
        "en": "Tempo/Whip into forward element",
    },
    "mid_pass_direction_change": {
        "he": "שינוי כיוון תנועה באמצע פס",
        "en": "Change of movement direction in middle of pass",
    },
}

# ------------------------------
# 2. Bonuses
# ------------------------------
BONUS_SLOTS = 8

# League: every occupied slot after the level's minimum index earns a flat bonus.
# A level has no entry when no slot qualifies.
LEAGUE_BONUS = 0.3
LEAGUE_MIN_INDEX = {
    "D": 1,
    "C": 2,
    "B": 3,
}

# National: bonus by slot index, awarded when the pass is long enough to reach it
NATIONAL_BONUS_BY_INDEX = {
    5: 0.3,
    6: 0.3,
    7: 0.4,
}

# International: every qualifying element after the first earns a flat bonus
INTERNATIONAL_BONUS = 1.0
INTERNATIONAL_THRESHOLD = {
    "F": 2.0,
    "M": 4.4,
}
INTERNATIONAL_DEFAULT_GENDER = "M"
