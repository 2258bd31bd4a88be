from nicegui import ui
from flashstudy.core.locale_manager import T
from flashstudy.core.log_manager import logger
from flashstudy.exceptions import FlashstudyError


def setup_page():
    ui.dark_mode() # Enable dark mode globally. For now, we keep it here.
    ui.add_head_html("<style>html, #c3 { padding: 0 !important;}</style>") # Remove default padding from html and #c3
    ui.query('body').classes('bg-gray-900')


def create_navbar(on_home=None):
    with ui.header().classes('w-full bg-black text-white justify-between items-center px-6 py-2 shadow-md'):
        with ui.row().classes('items-center gap-4'):
            ui.icon('style', size='sm')
            ui.label(T("app_title")).classes('text-xl font-bold tracking-tight')

        if on_home:
            ui.button(icon='upload_file', on_click=on_home).props('flat round color=white')


def notify_error(err: FlashstudyError):
    """Shows the translated message for a core failure."""
    logger.warning(f"{type(err).__name__}: {err}")
    ui.notify(T(err.locale_key, **err.params()), type='negative', multi_line=True)
