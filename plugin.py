from markupsafe import Markup

from config import CAPABILITY, MENU_TITLE, OPTION_NAME, PAGE_HOOK, PAGE_SLUG, PAGE_TITLE
from host import create_nonce, current_user_can
from renderers import color_picker_script, render_bar_style, render_form, render_theme_color
from settings_service import merge, read_settings, sanitize


class TopBarControl:
    """Wires the color settings into the host hooks, menu and settings registry."""

    option_name = OPTION_NAME

    def __init__(self, store, hooks, menus, settings, bar_showing=lambda: True):
        self.store = store
        self.bar_showing = bar_showing
        self.page_hook = menus.add_options_page(
            PAGE_TITLE, MENU_TITLE, CAPABILITY, PAGE_SLUG, self.render_settings_page)
        settings.register_setting(self.option_name, self.option_name, self.sanitize_settings)

        hooks.add_action('public_head', self.add_theme_color_meta)
        hooks.add_action('admin_head', self.add_admin_bar_styles)
        hooks.add_action('public_head', self.add_admin_bar_styles)
        hooks.add_action('admin_enqueue_scripts', self.enqueue_color_picker)

    def sanitize_settings(self, submitted, previous=None):
        return merge(previous, sanitize(submitted))

    def current_settings(self):
        return read_settings(self.store, self.option_name)

    def enqueue_color_picker(self, hook, assets):
        if hook != PAGE_HOOK:
            return None
        assets.enqueue_style('wp-color-picker')
        assets.enqueue_script('wp-color-picker')
        assets.add_inline_script('wp-color-picker', color_picker_script())
        return None

    def render_settings_page(self):
        if not current_user_can(CAPABILITY):
            return Markup('')
        return render_form(self.current_settings(), option_name=self.option_name,
                           nonce=create_nonce(self.option_name))

    def add_theme_color_meta(self):
        return render_theme_color(self.current_settings())

    def add_admin_bar_styles(self):
        if not self.bar_showing():
            return Markup('')
        return render_bar_style(self.current_settings(), bar_showing=True)
