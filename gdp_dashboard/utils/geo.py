# Very small helper to map country names/aliases -> dataset ids.
def country_id(name: str) -> str:
    if not name:
        return ""
    s = name.strip().lower()
    # Add more aliases as needed
    aliases = {
        "united states": "usa",
        "us": "usa",
        "u.s.": "usa",
        "u.s.a.": "usa",
        "united kingdom": "uk",
        "great britain": "uk",
        "gb": "uk",
        "people's republic of china": "china",
        "prc": "china",
        "deutschland": "germany",
        "brasil": "brazil",
    }
    return aliases.get(s, s)
