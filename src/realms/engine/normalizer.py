"""Collapse direction abbreviations and verb synonyms into canonical words."""

DIRECTION_WORDS = {
    "n": "north",
    "north": "north",
    "s": "south",
    "south": "south",
    "e": "east",
    "east": "east",
    "w": "west",
    "west": "west",
}

SYNONYMS = {
    "go": ("move", "walk", "travel", "head", "run"),
    "take": ("get", "pick", "grab", "acquire", "collect"),
    "look": ("examine", "inspect", "view", "see", "observe", "check"),
    "use": ("consume", "eat", "drink", "apply"),
    "attack": ("fight", "hit", "strike", "kill", "slay", "battle"),
    "talk": ("speak", "chat", "say", "tell", "ask"),
}

_CANONICAL = {
    word: base for base, words in SYNONYMS.items() for word in (base, *words)
}


def normalize_word(word: str) -> str:
    # Directions win over synonyms.
    if word in DIRECTION_WORDS:
        return DIRECTION_WORDS[word]
    return _CANONICAL.get(word, word)


def normalize(raw_text: str) -> str:
    """Lower-case ``raw_text`` and canonicalize each whitespace-split token."""
    return " ".join(normalize_word(word) for word in raw_text.lower().split())
