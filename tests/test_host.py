"""
Host facility tests: hooks, menu, settings registration and assets.
"""

import os
import sys
import unittest

TEST_DIR = os.path.dirname(os.path.abspath(__file__))
PROJECT_ROOT = os.path.dirname(TEST_DIR)
if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)

from flask import Flask
from markupsafe import Markup

from host import (
    AssetQueue,
    HookRegistry,
    MenuRegistry,
    SettingsRegistry,
    create_nonce,
    extract_fields,
    verify_nonce,
)
from settings_store import MemorySettingsStore


class TestHookRegistry(unittest.TestCase):
    def test_priority_then_registration_order(self):
        hooks = HookRegistry()
        hooks.add_action('head', lambda: Markup('<b>'))
        hooks.add_action('head', lambda: Markup('<a>'), priority=1)
        hooks.add_action('head', lambda: Markup('<c>'))
        self.assertEqual(hooks.do_action('head'), '<a><b><c>')

    def test_arguments_are_passed(self):
        hooks = HookRegistry()
        seen = []
        hooks.add_action('enqueue', lambda hook, assets: seen.append((hook, assets)))
        hooks.do_action('enqueue', 'page', 'queue')
        self.assertEqual(seen, [('page', 'queue')])

    def test_plain_strings_are_escaped(self):
        hooks = HookRegistry()
        hooks.add_action('head', lambda: '<script>')
        self.assertEqual(hooks.do_action('head'), '&lt;script&gt;')

    def test_failing_callback_is_skipped(self):
        hooks = HookRegistry()

        def broken():
            raise RuntimeError('boom')

        hooks.add_action('head', broken)
        hooks.add_action('head', lambda: Markup('<meta>'))
        with self.assertLogs('host', level='ERROR'):
            self.assertEqual(hooks.do_action('head'), '<meta>')

    def test_unknown_hook(self):
        hooks = HookRegistry()
        self.assertEqual(hooks.do_action('nothing'), '')


class TestMenuRegistry(unittest.TestCase):
    def test_add_options_page(self):
        menus = MenuRegistry()
        hook = menus.add_options_page('Title', 'Menu', 'manage_options', 'my-page', lambda: '')
        self.assertEqual(hook, 'settings_page_my-page')
        self.assertEqual(menus.get_page('my-page')['capability'], 'manage_options')
        self.assertIsNone(menus.get_page('other'))


class TestSettingsRegistry(unittest.TestCase):
    def test_extract_fields(self):
        form = {
            'option_page': 'opt',
            'opt[background_color]': '#fff',
            'opt[foreground_color]': '#000',
            'other[background_color]': '#123',
        }
        self.assertEqual(extract_fields('opt', form),
                         {'background_color': '#fff', 'foreground_color': '#000'})

    def test_process_submission_runs_callback_with_previous(self):
        store = MemorySettingsStore({'opt': {'a': '1'}})
        settings = SettingsRegistry()
        calls = []

        def callback(submitted, previous):
            calls.append((submitted, previous))
            return dict(previous or {}, **submitted)

        settings.register_setting('group', 'opt', callback)
        result = settings.process_submission('group', {'opt[b]': '2', 'b': 'x'}, store)

        self.assertTrue(result.ok)
        self.assertEqual(calls, [({'b': '2'}, {'a': '1'})])
        self.assertEqual(store.get('opt').value, {'a': '1', 'b': '2'})

    def test_process_submission_store_failure(self):
        store = MemorySettingsStore()
        store.available = False
        settings = SettingsRegistry()
        settings.register_setting('group', 'opt', lambda submitted, previous: submitted)
        self.assertFalse(settings.process_submission('group', {'opt[a]': '1'}, store).ok)

    def test_registration(self):
        settings = SettingsRegistry()
        settings.register_setting('group', 'opt', lambda submitted, previous: submitted)
        self.assertTrue(settings.is_registered('group'))
        self.assertFalse(settings.is_registered('opt2'))
        self.assertEqual(settings.option_name('group'), 'opt')


class TestNonces(unittest.TestCase):
    def setUp(self):
        self.app = Flask(__name__)
        self.app.config['SECRET_KEY'] = 'test'

    def test_nonce_is_stable_within_a_session(self):
        with self.app.test_request_context('/'):
            nonce = create_nonce('opt')
            self.assertTrue(nonce)
            self.assertEqual(create_nonce('opt'), nonce)
            self.assertNotEqual(create_nonce('other'), nonce)
            self.assertTrue(verify_nonce('opt', nonce))

    def test_missing_wrong_or_foreign_tokens(self):
        with self.app.test_request_context('/'):
            self.assertFalse(verify_nonce('opt', ''))
            nonce = create_nonce('opt')
            self.assertFalse(verify_nonce('opt', ''))
            self.assertFalse(verify_nonce('opt', nonce + 'x'))
            self.assertFalse(verify_nonce('opt', 'caf\u00e9'))
            self.assertFalse(verify_nonce('opt', None))
            self.assertFalse(verify_nonce('other', nonce))

    def test_sessions_get_different_nonces(self):
        with self.app.test_request_context('/'):
            first = create_nonce('opt')
        with self.app.test_request_context('/'):
            self.assertNotEqual(create_nonce('opt'), first)


class TestAssetQueue(unittest.TestCase):
    def setUp(self):
        self.assets = AssetQueue({'picker': {'style': '/p.css', 'script': '/p.js'}})

    def test_render(self):
        self.assets.enqueue_style('picker')
        self.assets.enqueue_script('picker')
        self.assets.enqueue_script('picker')
        self.assets.add_inline_script('picker', 'init();')

        html = self.assets.render()
        self.assertIn('<link rel="stylesheet" id="picker-css" href="/p.css">', html)
        self.assertEqual(html.count('<script id="picker-js" src="/p.js"></script>'), 1)
        self.assertIn('<script id="picker-js-after">init();</script>', html)

    def test_unknown_handles_are_skipped(self):
        self.assets.enqueue_script('missing')
        self.assertEqual(self.assets.render(), '')

    def test_empty_queue(self):
        self.assertEqual(AssetQueue().render(), '')


if __name__ == '__main__':
    unittest.main()
