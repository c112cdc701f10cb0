# Markup for the theme-color hint, the bar style override and the settings form.
# All three are pure functions of a settings record.

from jinja2 import Environment
from markupsafe import Markup

from config import (
    BAR_ID,
    BAR_SUBMENU_SELECTORS,
    BAR_SUBMENU_TEXT_SELECTORS,
    BAR_TEXT_SELECTORS,
    OPTION_NAME,
)

_env = Environment(autoescape=True, trim_blocks=True, lstrip_blocks=True)

BAR_STYLE_TEMPLATE = _env.from_string('''<style type="text/css">
    {{ bar_id }} {
        background-color: {{ background }} !important;
        background-image: none !important;
    }

    {{ text_selectors | join(",\n    ") }} {
        color: {{ foreground }} !important;
    }

    {{ submenu_selectors | join(",\n    ") }} {
        background-color: {{ background }} !important;
    }

    {{ submenu_text_selectors | join(",\n    ") }} {
        color: {{ foreground }} !important;
    }
</style>
''')

SETTINGS_FORM_TEMPLATE = _env.from_string('''<form action="{{ action }}" method="post">
    <input type="hidden" name="option_page" value="{{ option_name }}" />
{% if nonce %}
    <input type="hidden" name="_wpnonce" value="{{ nonce }}" />
{% endif %}
    <table class="form-table">
{% for field in fields %}
        <tr>
            <th scope="row">
                <label for="{{ field.key }}">{{ field.label }}</label>
            </th>
            <td>
                <input type="text"
                       name="{{ option_name }}[{{ field.key }}]"
                       id="{{ field.key }}"
                       class="wtbc-color-picker"
                       value="{{ field.value }}" />
                <p class="description">{{ field.description }}</p>
            </td>
        </tr>
{% endfor %}
    </table>
    <p class="submit">
        <input type="submit" name="submit" id="submit" class="button button-primary" value="Save Colors" />
    </p>
</form>
''')

COLOR_PICKER_SCRIPT = '''
jQuery(document).ready(function($) {
    $(".wtbc-color-picker").wpColorPicker();
});
'''


def _trusted(selectors):
    # Selectors are constants and contain '>' and quotes that must reach the CSS intact.
    return [Markup(selector) for selector in selectors]


def _as_record(record):
    if hasattr(record, 'as_dict'):
        return record.as_dict()
    return record or {}


def render_theme_color(record):
    background = _as_record(record).get('background_color')
    if not background:
        return Markup('')
    return Markup('<meta name="theme-color" content="{}">\n').format(background)


def render_bar_style(record, bar_showing=True):
    """Style override for the bar; nothing when the bar is not displayed."""
    if not bar_showing:
        return Markup('')

    record = _as_record(record)
    return Markup(BAR_STYLE_TEMPLATE.render(
        bar_id=BAR_ID,
        background=record.get('background_color', ''),
        foreground=record.get('foreground_color', ''),
        text_selectors=_trusted(BAR_TEXT_SELECTORS),
        submenu_selectors=_trusted(BAR_SUBMENU_SELECTORS),
        submenu_text_selectors=_trusted(BAR_SUBMENU_TEXT_SELECTORS),
    ))


def render_form(record, option_name=OPTION_NAME, action='/admin/options.php', nonce=None):
    record = _as_record(record)
    fields = [
        {
            'key': 'background_color',
            'label': 'Background Color',
            'value': record.get('background_color', ''),
            'description': 'This color will be applied to the admin bar background and theme-color meta tag.',
        },
        {
            'key': 'foreground_color',
            'label': 'Foreground Color',
            'value': record.get('foreground_color', ''),
            'description': 'This color will be applied to the admin bar text.',
        },
    ]
    return Markup(SETTINGS_FORM_TEMPLATE.render(
        action=action, option_name=option_name, nonce=nonce, fields=fields))


def color_picker_script():
    return COLOR_PICKER_SCRIPT
