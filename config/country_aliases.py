"""
Country name aliases.

Maps regional, abbreviated, and official-name variants to the names used by
the world map geometry. Keys are lowercase and stripped; values are the
canonical names. No canonical value may appear as a key that maps to a
different value, so normalizing twice equals normalizing once.
"""

COUNTRY_NAME_MAPPINGS: dict[str, str] = {
    # United States
    "usa": "United States of America",
    "us": "United States of America",
    "u.s.": "United States of America",
    "u.s.a.": "United States of America",
    "united states": "United States of America",
    # United Kingdom
    "uk": "United Kingdom",
    "u.k.": "United Kingdom",
    "great britain": "United Kingdom",
    # China
    "prc": "China",
    "people's republic of china": "China",
    # Korea
    "korea": "South Korea",
    "republic of korea": "South Korea",
    "korea, republic of": "South Korea",
    "korea, rep.": "South Korea",
    "korea, dem. rep.": "North Korea",
    "democratic people's republic of korea": "North Korea",
    "dprk": "North Korea",
    # Others
    "russian federation": "Russia",
    "czech republic": "Czechia",
    "uae": "United Arab Emirates",
}
