from flask import Flask, render_template, request, jsonify, redirect, url_for, flash, session, abort
import os
import logging
from markupsafe import Markup

# Load environment variables
from dotenv import load_dotenv
load_dotenv()

from config import CAPABILITY, OPTION_NAME, PAGE_SLUG
from host import (
    AssetQueue,
    HookRegistry,
    MenuRegistry,
    SettingsRegistry,
    current_user_can,
    extract_fields,
    verify_nonce,
)
from plugin import TopBarControl
from settings_service import read, rejected_fields, sanitize, save
from settings_store import SqliteSettingsStore

logger = logging.getLogger(__name__)

FIELD_LABELS = {
    'background_color': 'Background Color',
    'foreground_color': 'Foreground Color',
}


def create_app(config=None, store=None):
    app = Flask(__name__)
    app.config['SECRET_KEY'] = os.environ.get('SECRET_KEY')
    app.config['DATABASE_PATH'] = os.environ.get('DATABASE_PATH', 'top_bar.db')
    app.config['SHOW_TOP_BAR'] = os.environ.get('SHOW_TOP_BAR', '1').lower() not in ('0', 'false', 'no')
    if config:
        app.config.update(config)

    if not app.config['SECRET_KEY']:
        # Capabilities live in the signed session; never sign with a known key.
        if not app.config.get('TESTING'):
            logger.warning("SECRET_KEY is not set; using a random key, sessions end on restart")
        app.config['SECRET_KEY'] = os.urandom(32)

    if store is None:
        store = SqliteSettingsStore(app.config['DATABASE_PATH'])

    hooks = HookRegistry()
    menus = MenuRegistry()
    settings = SettingsRegistry()

    def is_admin_bar_showing():
        return bool(app.config['SHOW_TOP_BAR'] and session.get('user'))

    plugin = TopBarControl(store, hooks, menus, settings, bar_showing=is_admin_bar_showing)

    app.extensions['top_bar'] = {
        'store': store,
        'hooks': hooks,
        'menus': menus,
        'settings': settings,
        'plugin': plugin,
    }

    @app.route('/')
    def index():
        """Public page; the head carries the theme-color meta and bar styles"""
        return render_template('index.html',
                               head=hooks.do_action('public_head'),
                               show_bar=is_admin_bar_showing())

    @app.route('/admin/options-general.php')
    def options_page():
        """Registered options page, gated by the page's capability"""
        page = menus.get_page(request.args.get('page', ''))
        if page is None:
            abort(404)
        if not current_user_can(page['capability']):
            abort(403)

        assets = AssetQueue()
        hooks.do_action('admin_enqueue_scripts', page['hook'], assets)

        return render_template('admin_settings.html',
                               title=page['page_title'],
                               head=Markup('\n').join([assets.render(), hooks.do_action('admin_head')]),
                               content=page['callback'](),
                               show_bar=is_admin_bar_showing())

    @app.route('/admin/options.php', methods=['POST'])
    def save_options():
        """Form submission for any registered setting"""
        group = request.form.get('option_page', '')
        if not settings.is_registered(group):
            abort(400)
        if not current_user_can(CAPABILITY):
            abort(403)
        if not verify_nonce(group, request.form.get('_wpnonce', '')):
            logger.warning("Rejected %s submission with a missing or stale nonce", group)
            abort(400)

        submitted = extract_fields(settings.option_name(group), request.form)
        result = settings.process_submission(group, request.form, store)

        if result.ok:
            flash('Settings saved.', 'success')
            rejected = rejected_fields(submitted, sanitize(submitted))
            if rejected:
                labels = ', '.join(FIELD_LABELS.get(key, key) for key in rejected)
                flash(f'Ignored invalid color for: {labels}.', 'warning')
        else:
            logger.error("Saving %s failed: %s", group, result.error)
            flash('Settings could not be saved. Please try again.', 'error')

        return redirect(url_for('options_page', page=PAGE_SLUG))

    @app.route('/api/settings', methods=['GET'])
    def get_settings():
        """Current colors with defaults filled in"""
        if not current_user_can(CAPABILITY):
            return jsonify({'success': False, 'error': 'Forbidden'}), 403
        return jsonify({'success': True, 'settings': read(store, OPTION_NAME)})

    @app.route('/api/settings', methods=['POST'])
    def update_settings():
        """Save colors from a JSON payload"""
        if not current_user_can(CAPABILITY):
            return jsonify({'success': False, 'error': 'Forbidden'}), 403
        try:
            data = request.get_json(silent=True) or {}
            result = save(store, data, OPTION_NAME)
            if not result.ok:
                return jsonify({'success': False, 'error': result.error}), 500

            return jsonify({
                'success': True,
                'settings': read(store, OPTION_NAME),
                'rejected': rejected_fields(data, sanitize(data)),
            })
        except Exception as e:
            logger.exception("Settings API error: %s", e)
            return jsonify({'success': False, 'error': str(e)}), 500

    @app.cli.command('init-db')
    def init_db_command():
        """Create the options table."""
        store.init_db()
        print(f"Database ready at {app.config['DATABASE_PATH']}")

    return app


app = create_app()

if __name__ == '__main__':
    logging.basicConfig(level=logging.INFO)
    # Initialize database on startup (won't drop existing data)
    app.extensions['top_bar']['store'].init_db()
    port = int(os.environ.get('PORT', 5002))
    debug_mode = os.environ.get('FLASK_ENV') != 'production'
    print(f"Starting Top Bar Control on port {port}...")
    app.run(host='0.0.0.0', port=port, debug=debug_mode)
