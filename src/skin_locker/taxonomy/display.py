"""Display metadata for heroes: asset paths and portrait framing."""

import re

# Horizontal face position (percent) in each hero's render, used to crop
# gallery cards. Heroes not listed use DEFAULT_FACE_POSITION.
HERO_FACE_POSITION: dict[str, int] = {
    "Abrams": 0,
    "Bebop": 81,
    "Billy": 73,
    "Calico": 80,
    "Doorman": 40,
    "Drifter": 93,
    "Dynamo": 68,
    "Grey Talon": 77,
    "Haze": 78,
    "Holliday": 26,
    "Infernus": 100,
    "Ivy": 72,
    "Kelvin": 47,
    "Lady Geist": 87,
    "Lash": 54,
    "McGinnis": 22,
    "Mina": 54,
    "Mirage": 65,
    "Mo & Krill": 100,
    "Paige": 42,
    "Paradox": 59,
    "Pocket": 61,
    "Seven": 57,
    "Shiv": 68,
    "Sinclair": 61,
    "The Doorman": 40,
    "Victor": 45,
    "Vindicta": 83,
    "Viscous": 72,
    "Vyper": 48,
    "Warden": 55,
    "Wraith": 56,
    "Yamato": 56,
}

DEFAULT_FACE_POSITION = 55

_WHITESPACE = re.compile(r"\s+")


def hero_face_position(name: str) -> int:
    return HERO_FACE_POSITION.get(name, DEFAULT_FACE_POSITION)


def hero_asset_base_name(name: str) -> str:
    """'Lady Geist' -> 'Lady_Geist'."""
    return _WHITESPACE.sub("_", name.strip())


def hero_render_path(name: str) -> str:
    return f"/locker/heroes/{hero_asset_base_name(name)}_Render.png"


def hero_name_path(name: str) -> str:
    return f"/locker/names/{hero_asset_base_name(name)}_name.png"


def hero_wiki_url(name: str) -> str:
    return f"https://deadlock.wiki/File:{hero_asset_base_name(name)}_Render.png"
