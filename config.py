# EASY TWEAKS - Change defaults/labels here!
OPTION_NAME = 'wtbc_settings'

DEFAULT_COLORS = {
    'background_color': '#23282d',   # Dark admin bar
    'foreground_color': '#ffffff',   # White text
}

SETTING_KEYS = ('background_color', 'foreground_color')

# Settings page registration
PAGE_TITLE = 'WP Top Bar Control'
MENU_TITLE = 'Top Bar Control'
PAGE_SLUG = 'wp-top-bar-control'
CAPABILITY = 'manage_options'
PAGE_HOOK = f'settings_page_{PAGE_SLUG}'

# Bar element selectors
BAR_ID = '#wpadminbar'

BAR_TEXT_SELECTORS = [
    '#wpadminbar .ab-item',
    '#wpadminbar a.ab-item',
    '#wpadminbar > #wp-toolbar span.ab-label',
    '#wpadminbar > #wp-toolbar span.noticon',
    '#wpadminbar .ab-icon:before',
    '#wpadminbar .ab-label',
    '#wpadminbar input[type="text"]',
    '#wpadminbar input[type="search"]',
]

BAR_SUBMENU_SELECTORS = [
    '#wpadminbar .menupop .ab-sub-wrapper',
    '#wpadminbar .shortlink-input',
]

BAR_SUBMENU_TEXT_SELECTORS = [
    '#wpadminbar .ab-submenu .ab-item',
]

# Color picker assets served by the host
ASSET_SOURCES = {
    'wp-color-picker': {
        'style': '/static/vendor/color-picker.css',
        'script': '/static/vendor/color-picker.js',
    },
}
