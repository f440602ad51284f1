"""
Alias tables for game-title queries.

``DIRECT_ABBREVIATIONS`` maps a whole normalized query onto a canonical
title and is consulted first. ``PATTERN_SUBSTITUTIONS`` is applied in
order to every query without a direct hit: word keys are replaced on word
boundaries, symbol keys anywhere. Franchise-qualified arabic numerals are
rewritten to the roman form the Steam store uses; bare numerals are left
alone because most sequels ("Portal 2") are listed with digits.

All keys and values are written in normalized form (lowercase, no
``! ? :``).
"""

DIRECT_ABBREVIATIONS: dict[str, str] = {
    "ff7": "final fantasy vii",
    "ffvii": "final fantasy vii",
    "ff 7": "final fantasy vii",
    "ff7rb": "final fantasy vii rebirth",
    "ff10": "final fantasy x",
    "ff14": "final fantasy xiv",
    "ff15": "final fantasy xv",
    "ff16": "final fantasy xvi",
    "gta5": "grand theft auto v",
    "gtav": "grand theft auto v",
    "gta4": "grand theft auto iv",
    "gtaiv": "grand theft auto iv",
    "tlou": "the last of us",
    "dbd": "dead by daylight",
    "btd6": "bloons td 6",
    "ds3": "dark souls iii",
    "ds2": "dark souls ii",
    "er": "elden ring",
    "p5": "persona 5",
    "p5r": "persona 5 royal",
    "p3r": "persona 3 reload",
    "mhw": "monster hunter world",
    "mhr": "monster hunter rise",
    "rdr2": "red dead redemption 2",
    "bg3": "baldur's gate 3",
    "cs2": "counter-strike 2",
    "csgo": "counter-strike global offensive",
    "wow": "world of warcraft",
    "mc": "minecraft",
    "poe": "path of exile",
    "poe2": "path of exile 2",
    "hl2": "half-life 2",
    "l4d2": "left 4 dead 2",
    "tf2": "team fortress 2",
    "ror2": "risk of rain 2",
    "sts": "slay the spire",
    "kcd": "kingdom come deliverance",
    "kcd2": "kingdom come deliverance ii",
}

PATTERN_SUBSTITUTIONS: dict[str, str] = {
    "&": "and",
    # franchise shorthands
    "ff7r": "final fantasy vii remake",
    "ff7 r": "final fantasy vii remake",
    "ff7": "final fantasy vii",
    "ffvii": "final fantasy vii",
    "dos2": "divinity original sin 2",
    "divinity 2": "divinity original sin 2",
    "divinity ii": "divinity original sin 2",
    "gta": "grand theft auto",
    "cod": "call of duty",
    "dmc": "devil may cry",
    "ac": "assassin's creed",
    "ds": "dark souls",
    "d4": "diablo iv",
    "d3": "diablo iii",
    "d2": "diablo ii",
    "ff": "final fantasy",
    "re": "resident evil",
    "btd": "bloons td",
    "reb": "rebirth",
    # franchise-qualified numerals
    "grand theft auto 5": "grand theft auto v",
    "grand theft auto 4": "grand theft auto iv",
    "grand theft auto 3": "grand theft auto iii",
    "diablo 4": "diablo iv",
    "diablo 3": "diablo iii",
    "diablo 2": "diablo ii",
    "dark souls 3": "dark souls iii",
    "dark souls 2": "dark souls ii",
    "final fantasy 7": "final fantasy vii",
    "final fantasy 10": "final fantasy x",
    "final fantasy 14": "final fantasy xiv",
    "final fantasy 15": "final fantasy xv",
    "final fantasy 16": "final fantasy xvi",
    "kingdom come deliverance 2": "kingdom come deliverance ii",
}

STOPWORDS: frozenset[str] = frozenset(
    {"a", "an", "the", "and", "or", "of", "in", "on", "at", "to", "for", "with", "by"}
)

LEADING_ARTICLES: tuple[str, ...] = ("the", "a", "an")
