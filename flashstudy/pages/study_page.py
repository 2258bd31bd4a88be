from typing import Dict
from nicegui import ui, events
from sqlalchemy.engine import Engine

from flashstudy.pages.common import setup_page, create_navbar, notify_error
from flashstudy.core.locale_manager import T
from flashstudy.core.log_manager import logger
from flashstudy.config import DECK_DIR, SNAPSHOT_KEY
from flashstudy.exceptions import FlashstudyError, NoInputFiles
from flashstudy.services.scope_service import scope_options
from flashstudy.services.source_service import FolderSource, MemorySource
from flashstudy.services.storage_service import SqlStore
from flashstudy.services.workspace_service import StudyWorkspace


def register(engine: Engine):
    """Mounts the study page; snapshots are saved through a SqlStore on `engine`."""
    store = SqlStore(engine)

    @ui.page('/')
    def study_page():
        setup_page()

        # --- STATE & INITIALIZATION ---
        workspace = StudyWorkspace()

        # --- UI REFERENCES (Placeholders) ---
        # Bound during layout creation, declared here for scope clarity
        upload_view = None
        study_view = None
        results_view = None
        expected_container = None
        counters_row = None
        card_label = None
        scope_select = None
        shuffle_btn = None
        undo_btn = None
        results_label = None
        review_btn = None
        uploader = None
        front_switch = None
        font_input = None

        # --- LOGIC CONTROLLERS ---

        def show(view):
            for container in (upload_view, study_view, results_view):
                if container:
                    container.set_visibility(container is view)

        def render_expected():
            if not expected_container: return
            expected_container.clear()
            paths = workspace.expected_paths
            if not paths:
                return
            with expected_container:
                ui.label(T("expected_files_title")).classes('text-sm text-yellow-300 font-bold')
                with ui.column().classes('gap-0 font-mono text-xs text-gray-300'):
                    for path in paths:
                        ui.label(path)
                ui.button(T("discard_pending"), on_click=discard_pending)\
                    .props('flat dense color=grey').classes('text-xs')

        def render():
            """Redraws the current view from the session."""
            session = workspace.session
            if session is None:
                render_expected()
                show(upload_view)
                return

            if session.finished:
                if results_label:
                    results_label.set_text(T("wrong_summary", wrong=session.wrong_count, total=session.total))
                if review_btn:
                    review_btn.set_text(T("review_wrong", count=session.wrong_count))
                    review_btn.set_visibility(session.wrong_count > 0)
                show(results_view)
                return

            progress = session.progress()
            if counters_row:
                counters_row.clear()
                with counters_row:
                    ui.label(T("still_learning", count=progress["wrong"]))
                    ui.label(T("studied", answered=progress["answered"], total=progress["total"]))
                    ui.label(T("know", count=progress["correct"]))

            if card_label:
                text = session.displayed_text if session.total else T("empty_scope")
                card_label.set_text(text)
                card_label.style(f'font-size: {session.font_size_px}px')

            if scope_select:
                # Left blank during a review so re-picking the scope rebuilds it in full
                scope_select.set_value(None if session.is_review else session.scope)
            if shuffle_btn:
                shuffle_btn.props(f'color={"indigo" if session.is_shuffled else "grey-8"}')
            if undo_btn:
                undo_btn.set_enabled(session.current_index > 0)
            if front_switch:
                front_switch.set_value(not session.front_first)
            show(study_view)

        def started(message: str):
            session = workspace.session
            if uploader: uploader.reset()
            if message:
                ui.notify(message, type='positive')
            if scope_select and workspace.deck:
                options = scope_options(workspace.deck)
                # A restored snapshot may carry a scope this deck does not derive
                options.setdefault(session.scope, session.scope)
                scope_select.set_options(options, value=None if session.is_review else session.scope)
            if font_input: font_input.set_value(str(session.font_size))
            render()

        async def handle_upload(e: events.MultiUploadEventArguments):
            restoring = workspace.pending is not None
            try:
                documents: Dict[str, bytes] = {}
                for f in e.files:
                    documents[f.name] = await f.read()
                await workspace.upload(MemorySource(documents))
            except FlashstudyError as err:
                notify_error(err)
                if uploader: uploader.reset()
                return
            deck = workspace.deck
            started(T("session_restored") if restoring else T("deck_loaded", cards=len(deck), files=len(deck.paths)))

        async def load_folder():
            folder = folder_input.value.strip() if folder_input.value else ""
            if not folder:
                notify_error(NoInputFiles())
                return
            restoring = workspace.pending is not None
            try:
                await workspace.upload(FolderSource(folder))
            except FlashstudyError as err:
                notify_error(err)
                return
            deck = workspace.deck
            started(T("session_restored") if restoring else T("deck_loaded", cards=len(deck), files=len(deck.paths)))

        async def handle_state_upload(e: events.UploadEventArguments):
            try:
                payload = await e.file.read()
                session = workspace.import_snapshot(payload)
            except FlashstudyError as err:
                notify_error(err)
                return
            finally:
                e.sender.reset()

            if session is None:
                ui.notify(T("snapshot_pending", count=len(workspace.expected_paths)), type='info')
                render()
            else:
                started(T("session_restored"))

        def load_saved():
            try:
                session = workspace.restore(store, SNAPSHOT_KEY)
            except FlashstudyError as err:
                notify_error(err)
                return
            if session is None:
                ui.notify(T("snapshot_pending", count=len(workspace.expected_paths)), type='info')
                render()
            else:
                started(T("session_restored"))

        def discard_pending():
            workspace.clear_pending()
            render()

        def save_progress():
            try:
                workspace.save(store, SNAPSHOT_KEY)
            except FlashstudyError as err:
                notify_error(err)
                return
            ui.notify(T("session_saved"), type='positive')

        def export_state():
            try:
                payload = workspace.export_snapshot()
            except FlashstudyError as err:
                notify_error(err)
                return
            ui.download.content(payload, 'state.json', 'application/json')

        def back_to_upload():
            workspace.reset()
            render()

        def act(action):
            """Runs one session transition and redraws."""
            def handler(*_):
                if workspace.session is None:
                    return
                action(workspace.session)
                render()
            return handler

        mark_wrong = act(lambda s: s.mark_wrong())
        mark_correct = act(lambda s: s.mark_correct())
        undo = act(lambda s: s.undo())
        toggle_shuffle = act(lambda s: s.toggle_shuffle())
        flip = act(lambda s: s.flip())
        review_wrong = act(lambda s: s.review_wrong_only())
        restart = act(lambda s: s.restart_full_deck())

        def change_scope(e: events.ValueChangeEventArguments):
            session = workspace.session
            if session is None or e.value is None or (e.value == session.scope and not session.is_review):
                return
            session.change_scope(e.value)
            render()

        def set_front_first(e: events.ValueChangeEventArguments):
            if workspace.session is None: return
            # The switch reads "show definition first"
            workspace.session.set_front_first(not e.value)
            render()

        def set_font_size(e: events.ValueChangeEventArguments):
            if workspace.session is None: return
            workspace.session.set_font_size(str(e.value or ""))
            render()

        # --- KEYBOARD ---
        def handle_key(e: events.KeyEventArguments):
            session = workspace.session
            if session is None or session.finished: return
            if not e.action.keydown: return

            if e.key == ' ': flip()
            elif e.key == '1' or e.key == 'ArrowLeft': mark_wrong()
            elif e.key == '2' or e.key == 'ArrowRight': mark_correct()
            elif e.key == 'z': undo()
            elif e.key == 's': toggle_shuffle()

        ui.keyboard(on_key=handle_key)

        # --- LAYOUT ---
        create_navbar(on_home=back_to_upload)

        with ui.dialog() as settings_dialog, ui.card().classes('w-80 bg-gray-800 text-gray-100 gap-4'):
            front_switch = ui.switch(T("definition_first"), value=False, on_change=set_front_first)
            font_input = ui.input(T("font_size"), value='30', on_change=set_font_size).props('type=number min=8 max=72 dark')
            ui.button(T("restart_session"), on_click=lambda: (settings_dialog.close(), restart()))\
                .classes('w-full bg-red-600 text-white')
            ui.button(T("export_state"), icon='download', on_click=export_state).classes('w-full')
            ui.button(T("save_progress"), icon='save', on_click=save_progress).classes('w-full')
            ui.button(T("close"), on_click=settings_dialog.close).props('flat').classes('w-full')

        with ui.column().classes('w-screen min-h-screen bg-gray-900 text-white items-center p-4'):

            # --- STEP 1: UPLOAD ---
            with ui.card().classes('w-full max-w-2xl bg-gray-800 p-8 rounded-xl shadow-xl gap-4') as upload_view:
                ui.label(T("upload_title")).classes('text-3xl font-bold text-gray-100 self-center')
                ui.label(T("upload_subtitle")).classes('text-gray-400 self-center text-center')
                ui.code(T("upload_sample"), language='text').classes('w-full')

                uploader = ui.upload(
                    on_multi_upload=handle_upload,
                    multiple=True,
                    auto_upload=True,
                    label=T("upload_files"),
                ).props('accept=".csv" color="indigo-10" flat bordered').classes('w-full')

                with ui.row().classes('w-full items-end gap-2'):
                    folder_input = ui.input(T("upload_folder_label"), value=DECK_DIR).props('dark dense').classes('grow')
                    ui.button(T("upload_folder_button"), icon='folder_open', on_click=load_folder)

                ui.separator().classes('opacity-30')
                with ui.row().classes('w-full items-center gap-2'):
                    ui.upload(
                        on_upload=handle_state_upload,
                        auto_upload=True,
                        label=T("import_state"),
                    ).props('accept=".json" flat bordered').classes('grow')
                    ui.button(T("load_saved"), icon='restore', on_click=load_saved).props('flat')

                expected_container = ui.column().classes('w-full gap-1')
                ui.label(T("upload_hint")).classes('text-gray-500 text-sm self-center')

            # --- STEP 2: STUDY ---
            with ui.column().classes('w-full max-w-5xl gap-6') as study_view:
                with ui.row().classes('w-full justify-between items-center text-gray-300 px-4'):
                    scope_select = ui.select(options={}, label=T("scope_label"), on_change=change_scope)\
                        .props('dark dense outlined').classes('w-64')
                    counters_row = ui.row().classes('gap-8')
                    ui.button(icon='settings', on_click=settings_dialog.open).props('flat round color=grey')

                with ui.card().classes('w-full h-[70vh] bg-gray-700 rounded-xl items-center justify-center cursor-pointer select-none overflow-auto')\
                        .on('click', flip):
                    card_label = ui.label('').classes('text-gray-100 text-center whitespace-pre-wrap')

                with ui.row().classes('w-full justify-center items-center gap-10'):
                    undo_btn = ui.button('↺', on_click=undo).props('round color=grey-8').tooltip(T("undo"))
                    ui.button('✕', on_click=mark_wrong).props('color=red-7 size=lg')
                    ui.button('✓', on_click=mark_correct).props('color=green-7 size=lg')
                    shuffle_btn = ui.button('🔀', on_click=toggle_shuffle).props('round color=grey-8').tooltip(T("shuffle"))

            # --- STEP 3: RESULTS ---
            with ui.card().classes('w-full max-w-5xl bg-gray-800 p-8 rounded-xl shadow-xl items-center gap-6') as results_view:
                ui.label(T("session_complete")).classes('text-3xl font-semibold')
                results_label = ui.label('')
                review_btn = ui.button('', on_click=review_wrong).classes('w-full bg-yellow-600 text-white')
                ui.button(T("restart_full_deck"), on_click=restart).classes('w-full bg-blue-600 text-white')
                ui.button(T("upload_new"), icon='arrow_back', on_click=back_to_upload).props('flat color=grey')

        logger.debug("Study page rendered.")
        render()
