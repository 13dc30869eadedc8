"""Emoji alias normalization between GitHub, Bitbucket and Slack.

Each source host shares most emoji aliases with Slack, but not all of them.
Two-way tables map aliases that exist on both sides under different names,
and are applied in either direction. One-way tables narrow Slack-only aliases
(gender-neutral or unofficial variants) to their closest equivalent on the
source host; these conversions are stable but cannot be inverted.

For example, Slack's ":no_good:" and ":man-gesturing-no:" both narrow to
Bitbucket's ":man_gesturing_no:", which always widens back to
":man-gesturing-no:".

Every alias is rewritten in a single pass, so an output alias is never
rewritten again by the same call.
"""

import re
from typing import Dict, Mapping, Pattern, Tuple

from .dialects import DialectPair

BITBUCKET_TO_SLACK_TWO_WAY: Dict[str, str] = {
    ":frame_photo:": ":frame_with_picture:",
    ":robot:": ":robot_face:",
    # Smileys
    ":rofl:": ":rolling_on_the_floor_laughing:",
    ":slight_frown:": ":slightly_frowning_face:",
    ":slight_smile:": ":slightly_smiling_face:",
    ":upside_down:": ":upside_down_face:",
    # People (gendered and gender-neutral)
    ":man_facepalming:": ":man-facepalming:",
    ":man_gesturing_no:": ":man-gesturing-no:",
    ":man_gesturing_ok:": ":man-gesturing-ok:",
    ":man_shrugging:": ":man-shrugging:",
    ":woman_facepalming:": ":woman-facepalming:",
    ":woman_gesturing_no:": ":woman-gesturing-no:",
    ":woman_gesturing_ok:": ":woman-gesturing-ok:",
    ":woman_shrugging:": ":woman-shrugging:",
    ":person_bald:": ":bald_person:",
}

SLACK_TO_BITBUCKET_ONE_WAY: Dict[str, str] = {
    ":face_palm:": ":man_facepalming:",  # No gender-neutral version in Bitbucket
    ":memo:": ":pencil:",  # Slack supports both, Bitbucket doesn't
    ":no_good:": ":man_gesturing_no:",  # No gender-neutral version in Bitbucket
    ":ok_woman:": ":woman_gesturing_ok:",  # Slack supports both
    ":shrug:": ":man_shrugging:",  # No gender-neutral version in Bitbucket
    ":thanks:": ":pray:",  # Unofficial but common alias in Slack
}

# Based on https://api.github.com/emojis
GITHUB_TO_SLACK_TWO_WAY: Dict[str, str] = {
    ":framed_picture:": ":frame_with_picture:",
    ":robot:": ":robot_face:",
    # Smileys
    ":rofl:": ":rolling_on_the_floor_laughing:",
    # People (gendered and gender-neutral)
    ":man_facepalming:": ":man-facepalming:",
    ":no_good_man:": ":man-gesturing-no:",
    ":ok_man:": ":man-gesturing-ok:",
    ":man_shrugging:": ":man-shrugging:",
    ":woman_facepalming:": ":woman-facepalming:",
    ":no_good_woman:": ":woman-gesturing-no:",
    ":woman_shrugging:": ":woman-shrugging:",
    ":person_bald:": ":bald_person:",
    ":facepalm:": ":face_palm:",
}

# ":ok_woman:" is a different emoji on each side: GitHub's gender-neutral
# ":ok_person:" is Slack's ":ok_woman:", and GitHub's ":ok_woman:" is Slack's
# ":woman-gesturing-ok:". These fixed overrides are applied together with
# the two-way table, never derived from it.
GITHUB_TO_SLACK_OVERRIDES: Dict[str, str] = {
    ":ok_woman:": ":woman-gesturing-ok:",
    ":ok_person:": ":ok_woman:",
}
SLACK_TO_GITHUB_OVERRIDES: Dict[str, str] = {
    ":ok_woman:": ":ok_person:",
    ":woman-gesturing-ok:": ":ok_woman:",
}

SLACK_TO_GITHUB_ONE_WAY: Dict[str, str] = {
    ":thanks:": ":pray:",  # Unofficial but common alias in Slack
}

SLACK_SKIN_TONE_PATTERN = re.compile(r":skin-tone-\d:")


def _invert(table: Mapping[str, str]) -> Dict[str, str]:
    return {to: from_ for from_, to in table.items()}


def _compile(*tables: Mapping[str, str]) -> Tuple[Dict[str, str], Pattern[str]]:
    merged: Dict[str, str] = {}
    for table in tables:
        for from_, to in table.items():
            merged.setdefault(from_, to)
    # Longest aliases first, so no alias shadows a longer one
    aliases = sorted(merged, key=len, reverse=True)
    return merged, re.compile("|".join(re.escape(alias) for alias in aliases))


_BITBUCKET_TO_SLACK = _compile(BITBUCKET_TO_SLACK_TWO_WAY)
_SLACK_TO_BITBUCKET = _compile(
    _invert(BITBUCKET_TO_SLACK_TWO_WAY), SLACK_TO_BITBUCKET_ONE_WAY
)
_GITHUB_TO_SLACK = _compile(GITHUB_TO_SLACK_OVERRIDES, GITHUB_TO_SLACK_TWO_WAY)
_SLACK_TO_GITHUB = _compile(
    SLACK_TO_GITHUB_OVERRIDES, _invert(GITHUB_TO_SLACK_TWO_WAY), SLACK_TO_GITHUB_ONE_WAY
)


def _replace(text: str, compiled: Tuple[Dict[str, str], Pattern[str]]) -> str:
    table, pattern = compiled
    return pattern.sub(lambda m: table[m.group(0)], text)


def trim_skin_tones(text: str) -> str:
    """Remove Slack skin tone suffixes, which the source hosts don't support."""
    return SLACK_SKIN_TONE_PATTERN.sub("", text)


def bitbucket_to_slack_emoji(text: str) -> str:
    """Rename Bitbucket emoji aliases to their Slack names.

    The inverse of :func:`slack_to_bitbucket_emoji` for two-way aliases.
    """
    return _replace(text, _BITBUCKET_TO_SLACK)


def slack_to_bitbucket_emoji(text: str) -> str:
    """Rename Slack emoji aliases to their Bitbucket names.

    Slack-only aliases are narrowed to the closest Bitbucket equivalent, and
    skin tones are dropped.
    """
    return _replace(trim_skin_tones(text), _SLACK_TO_BITBUCKET)


def github_to_slack_emoji(text: str) -> str:
    """Rename GitHub emoji aliases to their Slack names.

    The inverse of :func:`slack_to_github_emoji` for two-way aliases.
    """
    return _replace(text, _GITHUB_TO_SLACK)


def slack_to_github_emoji(text: str) -> str:
    """Rename Slack emoji aliases to their GitHub names, dropping skin tones."""
    return _replace(trim_skin_tones(text), _SLACK_TO_GITHUB)


_NORMALIZERS = {
    DialectPair.GITHUB_TO_SLACK: github_to_slack_emoji,
    DialectPair.SLACK_TO_GITHUB: slack_to_github_emoji,
    DialectPair.BITBUCKET_TO_SLACK: bitbucket_to_slack_emoji,
    DialectPair.SLACK_TO_BITBUCKET: slack_to_bitbucket_emoji,
}


def normalize_emoji(text: str, pair: DialectPair) -> str:
    """Rename emoji aliases for a translation direction."""
    return _NORMALIZERS[pair](text)
