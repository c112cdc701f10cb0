"""Sanitize, merge and read the top bar color settings."""

import logging
from collections.abc import Mapping
from dataclasses import dataclass

from colors import validate
from config import DEFAULT_COLORS, OPTION_NAME, SETTING_KEYS

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TopBarSettings:
    background_color: str
    foreground_color: str

    @classmethod
    def from_record(cls, record):
        return cls(background_color=record['background_color'],
                   foreground_color=record['foreground_color'])

    def as_dict(self):
        return {
            'background_color': self.background_color,
            'foreground_color': self.foreground_color,
        }


def sanitize(payload):
    """Project a submitted payload onto the recognized keys.

    Fields that fail validation are left out; unknown keys are ignored.
    """
    sanitized = {}
    if not isinstance(payload, Mapping):
        return sanitized

    for key in SETTING_KEYS:
        if key not in payload:
            continue
        color = validate(payload[key])
        if color is None:
            logger.info("Dropped invalid %s: %r", key, payload[key])
            continue
        sanitized[key] = color
    return sanitized


def rejected_fields(payload, sanitized):
    """Recognized keys that were submitted but did not survive sanitize()."""
    if not isinstance(payload, Mapping):
        return []
    return [key for key in SETTING_KEYS if key in payload and key not in sanitized]


def merge(previous, sanitized):
    """Overlay freshly sanitized fields on the previously stored record."""
    merged = sanitize(previous or {})
    merged.update(sanitized)
    return merged


def read(store, name=OPTION_NAME):
    """Return a complete record: stored values where valid, defaults elsewhere."""
    result = store.get(name)
    if not result.ok:
        logger.warning("Falling back to default colors: %s", result.error)
        stored = {}
    else:
        stored = result.value or {}

    record = {}
    for key in SETTING_KEYS:
        record[key] = validate(stored.get(key)) or DEFAULT_COLORS[key]
    return record


def read_settings(store, name=OPTION_NAME):
    return TopBarSettings.from_record(read(store, name))


def save(store, payload, name=OPTION_NAME):
    """Sanitize a submission and replace the stored record with the merge."""
    previous = store.get(name)
    if not previous.ok:
        return previous

    record = merge(previous.value, sanitize(payload))
    return store.put(name, record)
