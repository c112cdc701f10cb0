"""
Host facilities the settings panel plugs into: action hooks, the options-page
menu, settings registration with a sanitize callback, an asset queue and
capability checks.
"""

import hmac
import logging
import re
import secrets
from collections import defaultdict

from flask import session
from markupsafe import Markup, escape

from config import ASSET_SOURCES

logger = logging.getLogger(__name__)

FIELD_NAME_RE = re.compile(r'^(?P<name>[\w-]+)\[(?P<key>[\w-]+)\]$')


def extract_fields(name, form):
    """Collect `name[key]` form fields into a plain {key: value} mapping."""
    submitted = {}
    for field, value in form.items():
        match = FIELD_NAME_RE.match(field)
        if match and match.group('name') == name:
            submitted[match.group('key')] = value
    return submitted


class HookRegistry:
    def __init__(self):
        self._actions = defaultdict(list)
        self._counter = 0

    def add_action(self, hook, callback, priority=10):
        self._counter += 1
        self._actions[hook].append((priority, self._counter, callback))

    def do_action(self, hook, *args):
        """Run every callback for `hook` and join the markup they return.

        A failing callback is logged and skipped; the rest of the page still renders.
        """
        output = []
        for _priority, _order, callback in sorted(self._actions.get(hook, [])):
            try:
                result = callback(*args)
            except Exception as e:
                logger.exception("Hook %s callback %r failed: %s", hook, callback, e)
                continue
            if result:
                output.append(escape(result))
        return Markup('').join(output)


class MenuRegistry:
    def __init__(self):
        self.pages = {}

    def add_options_page(self, page_title, menu_title, capability, slug, callback):
        self.pages[slug] = {
            'page_title': page_title,
            'menu_title': menu_title,
            'capability': capability,
            'callback': callback,
            'hook': f'settings_page_{slug}',
        }
        return self.pages[slug]['hook']

    def get_page(self, slug):
        return self.pages.get(slug)


class SettingsRegistry:
    def __init__(self):
        self._settings = {}

    def register_setting(self, group, name, sanitize_callback):
        self._settings[group] = (name, sanitize_callback)

    def is_registered(self, group):
        return group in self._settings

    def option_name(self, group):
        return self._settings[group][0]

    def process_submission(self, group, form, store):
        """Run the registered sanitize callback on a submitted form and persist the result.

        Form fields are flat `name[key]` pairs; only fields for this option are passed on.
        """
        name, sanitize_callback = self._settings[group]
        submitted = extract_fields(name, form)

        previous = store.get(name)
        if not previous.ok:
            return previous

        record = sanitize_callback(submitted, previous.value)
        return store.put(name, record)


class AssetQueue:
    def __init__(self, sources=None):
        self.sources = sources if sources is not None else ASSET_SOURCES
        self.styles = []
        self.scripts = []
        self.inline_scripts = defaultdict(list)

    def enqueue_style(self, handle):
        if handle not in self.styles:
            self.styles.append(handle)

    def enqueue_script(self, handle):
        if handle not in self.scripts:
            self.scripts.append(handle)

    def add_inline_script(self, handle, code):
        self.inline_scripts[handle].append(code)

    def render(self):
        tags = []
        for handle in self.styles:
            src = self.sources.get(handle, {}).get('style')
            if src:
                tags.append(Markup('<link rel="stylesheet" id="{}-css" href="{}">').format(handle, src))
        for handle in self.scripts:
            src = self.sources.get(handle, {}).get('script')
            if src:
                tags.append(Markup('<script id="{}-js" src="{}"></script>').format(handle, src))
            for code in self.inline_scripts.get(handle, []):
                # Inline code is registered by plugins, not user input.
                tags.append(Markup('<script id="{}-js-after">{}</script>').format(handle, Markup(code)))
        return Markup('\n').join(tags)


def current_user_can(capability):
    return capability in session.get('capabilities', [])


def create_nonce(action):
    """Per-session token for `action`, emitted as the form's `_wpnonce` field."""
    nonces = dict(session.get('nonces', {}))
    if action not in nonces:
        nonces[action] = secrets.token_urlsafe(32)
        session['nonces'] = nonces
    return nonces[action]


def verify_nonce(action, token):
    expected = session.get('nonces', {}).get(action)
    if not expected or not isinstance(token, str):
        return False
    return hmac.compare_digest(expected.encode('utf-8'), token.encode('utf-8'))
