import customtkinter as ctk
import threading
import queue
import logging

from package_viewer.core.config import ConfigManager
from package_viewer.core.exceptions import FetchError, PackageViewerError
from package_viewer.core.models import SectionName
from package_viewer.core.network import NetworkManager
from package_viewer.core.session import PackageSession
from package_viewer.utils.logging import drain_log_queue, log_queue, log_history

# Custom colors
ACCENT_GOLD = "#C9A15B"
PAPER_WHITE = "#F4F1EA"
NIGHT_BLUE = "#1E2433"

MESSAGE_TAB = "Message"
PLACEHOLDER_TEXT = "Press 'Fetch Data' to get the latest data."


class App(ctk.CTk):
    def __init__(self, master=None):
        super().__init__(master)

        self.title("Game Package Viewer")
        self.geometry("820x600")

        # --- Backend Integration ---
        self.config_manager = ConfigManager()
        config = self.config_manager.get_config()

        ctk.set_appearance_mode(config.appearance_mode)
        ctk.set_default_color_theme("dark-blue")

        self.network_manager = NetworkManager(config)
        self.session = PackageSession(self.network_manager.fetch_packages, game_id=config.game_id)

        self._create_widgets()
        self._select_initial_section(config.last_section)

        # --- Threading and Queue for UI updates ---
        self.gui_queue = queue.Queue()
        self.after(100, self._process_gui_queue)
        self.after(100, self._process_log_queue)

        self.console_window = None

    def _process_gui_queue(self):
        """Processes messages from other threads to update the GUI safely."""
        try:
            while not self.gui_queue.empty():
                callback, args, kwargs = self.gui_queue.get_nowait()
                callback(*args, **kwargs)
        except queue.Empty:
            pass
        finally:
            self.after(50, self._process_gui_queue)

    def _process_log_queue(self):
        """Processes messages from the logging queue to update the console."""
        try:
            while not log_queue.empty():
                message = log_queue.get_nowait()
                if self.console_window and self.console_window.winfo_exists():
                    self.console_window.log(message)
        except queue.Empty:
            pass
        finally:
            self.after(100, self._process_log_queue)

    def _queue_ui_update(self, callback, *args, **kwargs):
        """A thread-safe way to queue a GUI update."""
        self.gui_queue.put((callback, args, kwargs))

    # --- Fetch ---

    def _on_fetch_click(self):
        self.fetch_button.configure(state="disabled")
        self.status_label.configure(text="Fetching game packages...")
        threading.Thread(target=self._fetch_worker, daemon=True).start()

    def _fetch_worker(self):
        """(Worker Thread) Performs the HTTP call; session updates happen on the Tk thread."""
        try:
            result = self.session.request()
        except Exception as e:
            logging.error(f"Unexpected error while fetching: {e}", exc_info=True)
            result = FetchError(str(e))
        self._queue_ui_update(self._on_fetch_done, result)

    def _on_fetch_done(self, result):
        self.fetch_button.configure(state="normal")
        if self.session.receive(result):
            self._refresh_text()
            self.status_label.configure(text="Data fetched.")
        else:
            self.status_label.configure(text=self.session.last_error)

    # --- Copy / Clear ---

    def _selected_section(self) -> SectionName:
        label = self.section_option_menu.get()
        return next(name for name in SectionName if name.label == label)

    def _on_copy_section_click(self):
        name = self._selected_section()
        try:
            self.session.copy_section(name)
            self.status_label.configure(text=f"Copied {name.label} to clipboard.")
        except PackageViewerError as e:
            self.status_label.configure(text=f"Error: {e}")

    def _on_copy_all_click(self):
        try:
            self.session.copy_all()
            self.status_label.configure(text="Copied full message to clipboard.")
        except PackageViewerError as e:
            self.status_label.configure(text=f"Error: {e}")

    def _on_clear_click(self):
        self.session.clear()
        self._refresh_text()
        self.status_label.configure(text="Cleared.")

    def _on_section_select(self, label: str):
        name = next(name for name in SectionName if name.label == label)
        self.tabview.set(label)
        self.config_manager.update_config(last_section=name.value)

    def _select_initial_section(self, value: str):
        try:
            name = SectionName(value)
        except ValueError:
            name = SectionName.MAIN
        self.section_option_menu.set(name.label)
        self.tabview.set(name.label)

    # --- Rendering ---

    def _refresh_text(self):
        sections = self.session.sections
        for name, textbox in self.section_textboxes.items():
            section = sections.get(name)
            self._set_text(textbox, section.display_text if section else PLACEHOLDER_TEXT)
        self._set_text(self.message_textbox, self.session.message or PLACEHOLDER_TEXT)

    @staticmethod
    def _set_text(textbox, text: str):
        textbox.configure(state="normal")
        textbox.delete("1.0", "end")
        textbox.insert("1.0", text)
        textbox.configure(state="disabled")

    def _create_widgets(self):
        """Creates and lays out all the GUI widgets."""
        main_frame = ctk.CTkFrame(self, fg_color=NIGHT_BLUE,
                                  border_color=ACCENT_GOLD, border_width=2)
        main_frame.pack(pady=10, padx=10, fill="both", expand=True)

        main_frame.grid_columnconfigure(0, weight=1)
        main_frame.grid_rowconfigure(2, weight=1)

        # --- Buttons ---
        button_frame = ctk.CTkFrame(main_frame, fg_color="transparent")
        button_frame.grid(row=0, column=0, pady=5, padx=10, sticky="ew")

        self.fetch_button = self._make_button(button_frame, "Fetch Data", self._on_fetch_click)
        self.section_option_menu = ctk.CTkOptionMenu(button_frame,
                                                     values=[name.label for name in SectionName],
                                                     fg_color=ACCENT_GOLD,
                                                     button_color=ACCENT_GOLD,
                                                     text_color=NIGHT_BLUE,
                                                     command=self._on_section_select)
        self.section_option_menu.pack(side="left", padx=5)
        self._make_button(button_frame, "Copy Section", self._on_copy_section_click)
        self._make_button(button_frame, "Copy All", self._on_copy_all_click)
        self._make_button(button_frame, "Clear", self._on_clear_click)
        self._make_button(button_frame, "Console", self._open_console_window, side="right")

        # --- Status Label ---
        self.status_label = ctk.CTkLabel(main_frame, text=PLACEHOLDER_TEXT,
                                         font=ctk.CTkFont(size=14, weight="bold"))
        self.status_label.grid(row=1, column=0, pady=5, padx=10, sticky="ew")

        # --- Sections ---
        self.tabview = ctk.CTkTabview(main_frame, segmented_button_selected_color=ACCENT_GOLD)
        self.tabview.grid(row=2, column=0, pady=5, padx=10, sticky="nsew")

        self.section_textboxes = {}
        for name in SectionName:
            self.section_textboxes[name] = self._make_textbox(self.tabview.add(name.label))
        self.message_textbox = self._make_textbox(self.tabview.add(MESSAGE_TAB))

    def _make_button(self, parent, text, command, side="left"):
        button = ctk.CTkButton(parent, text=text, command=command, width=110,
                               fg_color=ACCENT_GOLD,
                               hover_color=PAPER_WHITE,
                               text_color=NIGHT_BLUE)
        button.pack(side=side, padx=5)
        return button

    def _make_textbox(self, tab):
        tab.grid_columnconfigure(0, weight=1)
        tab.grid_rowconfigure(0, weight=1)
        textbox = ctk.CTkTextbox(tab, wrap="word",
                                 fg_color=PAPER_WHITE,
                                 text_color=NIGHT_BLUE,
                                 font=("Courier New", 12))
        textbox.grid(row=0, column=0, sticky="nsew")
        self._set_text(textbox, PLACEHOLDER_TEXT)
        return textbox

    def _open_console_window(self):
        if self.console_window is None or not self.console_window.winfo_exists():
            # The new window replays log_history, which already holds anything still queued
            drain_log_queue()
            self.console_window = ConsoleWindow(self)
        else:
            self.console_window.focus()


class ConsoleWindow(ctk.CTkToplevel):
    def __init__(self, master):
        super().__init__(master)
        self.title("Console Log")
        self.geometry("800x400")

        self.grid_columnconfigure(0, weight=1)
        self.grid_rowconfigure(0, weight=1)

        self.log_textbox = ctk.CTkTextbox(self, wrap="word",
                                          fg_color=NIGHT_BLUE,
                                          text_color=PAPER_WHITE,
                                          border_color=ACCENT_GOLD,
                                          border_width=2,
                                          font=("Courier New", 12))
        self.log_textbox.grid(row=0, column=0, sticky="nsew", padx=10, pady=10)
        self.log_textbox.configure(state="disabled")

        # Show what was logged before the window was opened
        for message in log_history:
            self.log(message)

    def log(self, message: str):
        """Appends a message to the log display."""
        self.log_textbox.configure(state="normal")
        self.log_textbox.insert("end", message + "\n")
        self.log_textbox.see("end")
        self.log_textbox.configure(state="disabled")
