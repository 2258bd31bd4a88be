# main.py
from nicegui import ui

from flashstudy.config import STORAGE_SECRET, PORT
from flashstudy.core.locale_manager import T
from flashstudy.database import make_engine, init_db
from flashstudy.pages import study_page

engine = make_engine()
study_page.register(engine)


def run():
    init_db(engine)
    ui.run(title=T("app_title", use_fallback=True), reload=False, port=PORT, storage_secret=STORAGE_SECRET)


# --- STARTUP ---
if __name__ in {"__main__", "__mp_main__"}:
    run()
