from __future__ import annotations

import tkinter as tk
from tkinter import ttk

from gui.mixins.throbber_mixin import Throbber

# NOTE: GUI-only module. No business logic here.


PALETTES = {
    "dark": {
        "bg": "#0f1219",
        "panel": "#161b26",
        "fg": "#cbd5e1",
        "muted": "#64748b",
        "header_bg": "#1e2532",
        "header_fg": "#94a3b8",
        "cell_bg": "#0f1219",
        "merged_bg": "#1a202c",
        "headerlike_bg": "#1b2233",
        "headerlike_fg": "#a5b4fc",
        "grid_line": "#1e293b",
        "accent": "#4f46e5",
        "error_bg": "#3b1219",
        "error_fg": "#fecaca",
    },
    "light": {
        "bg": "#f9fafb",
        "panel": "#ffffff",
        "fg": "#334155",
        "muted": "#64748b",
        "header_bg": "#f3f4f6",
        "header_fg": "#374151",
        "cell_bg": "#ffffff",
        "merged_bg": "#ffffff",
        "headerlike_bg": "#eef2ff",
        "headerlike_fg": "#4338ca",
        "grid_line": "#e5e7eb",
        "accent": "#4f46e5",
        "error_bg": "#fef2f2",
        "error_fg": "#dc2626",
    },
}


def apply_theme(app, theme: str) -> None:
    """Restyle ttk widgets + plain tk containers for the given palette."""
    pal = PALETTES[theme]
    app.palette = pal
    try:
        style = ttk.Style()
        if style.theme_use() != "clam":
            style.theme_use("clam")
        style.configure(".", background=pal["panel"], foreground=pal["fg"])
        style.configure("TFrame", background=pal["panel"])
        style.configure("TLabel", background=pal["panel"], foreground=pal["fg"])
        style.configure("Muted.TLabel", background=pal["panel"], foreground=pal["muted"])
        style.configure("Title.TLabel", background=pal["panel"], foreground=pal["fg"], font=("Segoe UI", 12, "bold"))
        style.configure("TButton", padding=(10, 4))
        style.configure("Accent.TButton", padding=(14, 5))
        style.map(
            "Accent.TButton",
            background=[("disabled", pal["header_bg"]), ("active", "#6366f1"), ("!disabled", pal["accent"])],
            foreground=[("disabled", pal["muted"]), ("!disabled", "white")],
        )
        style.configure(
            "Viewer.TCombobox",
            fieldbackground=pal["cell_bg"],
            background=pal["panel"],
            foreground=pal["fg"],
        )
        style.map(
            "Viewer.TCombobox",
            fieldbackground=[("readonly", pal["cell_bg"]), ("disabled", pal["header_bg"])],
            foreground=[("readonly", pal["fg"])],
        )
    except tk.TclError:
        pass

    app.configure(background=pal["bg"])
    app.grid_canvas.configure(background=pal["bg"])
    app.grid_frame.configure(background=pal["grid_line"])
    app.error_label.configure(background=pal["error_bg"], foreground=pal["error_fg"])
    app.empty_label.configure(background=pal["bg"], foreground=pal["muted"])
    app.throbber.set_colors(background=pal["panel"], arc=pal["accent"], ring=pal["header_bg"], idle=pal["muted"])


def build_ui(app) -> None:
    app.columnconfigure(0, weight=1)
    app.rowconfigure(0, weight=1)

    root = ttk.Frame(app, padding=0)
    root.grid(row=0, column=0, sticky="nsew")
    root.columnconfigure(0, weight=1)
    root.rowconfigure(3, weight=1)

    # ----- TOP BAR: title, open, theme, throbber -----
    topbar = ttk.Frame(root, padding=(16, 10))
    topbar.grid(row=0, column=0, sticky="ew")
    topbar.columnconfigure(1, weight=1)

    ttk.Label(topbar, text="Excel Pro Viewer", style="Title.TLabel").grid(row=0, column=0, sticky="w")

    app.throbber = Throbber(topbar)
    app.throbber.grid(row=0, column=2, padx=(0, 6))
    app.loading_var = tk.StringVar(value="")
    ttk.Label(topbar, textvariable=app.loading_var, style="Muted.TLabel").grid(row=0, column=3, padx=(0, 12))

    app.theme_button = ttk.Button(
        topbar, text="Light Mode" if app.theme == "dark" else "Dark Mode", command=app.toggle_theme
    )
    app.theme_button.grid(row=0, column=4, padx=(0, 6))
    ttk.Button(topbar, text="Open Workbook...", style="Accent.TButton", command=app.open_file).grid(row=0, column=5)

    # ----- CONTROL BAR: sheet selector, row paging, sheet paging -----
    controls = ttk.Frame(root, padding=(16, 6))
    controls.grid(row=1, column=0, sticky="ew")
    controls.columnconfigure(2, weight=1)

    ttk.Label(controls, text="Select worksheet:", style="Muted.TLabel").grid(row=0, column=0, sticky="w")
    app.sheet_var = tk.StringVar()
    app.sheet_combo = ttk.Combobox(
        controls,
        textvariable=app.sheet_var,
        values=[],
        state="disabled",
        style="Viewer.TCombobox",
        width=36,
    )
    app.sheet_combo.grid(row=0, column=1, sticky="w", padx=(8, 0))
    app.sheet_combo.bind("<<ComboboxSelected>>", app._on_sheet_selected)

    paging = ttk.Frame(controls)
    paging.grid(row=0, column=3, sticky="e", padx=(0, 16))
    ttk.Label(paging, text="ROWS", style="Muted.TLabel").grid(row=0, column=0, padx=(0, 6))
    app.prev_page_button = ttk.Button(paging, text="◀", width=3, command=app.prev_page)
    app.prev_page_button.grid(row=0, column=1)
    app.row_range_var = tk.StringVar(value="0-0")
    ttk.Label(paging, textvariable=app.row_range_var, width=12, anchor="center").grid(row=0, column=2)
    app.next_page_button = ttk.Button(paging, text="▶", width=3, command=app.next_page)
    app.next_page_button.grid(row=0, column=3)

    ttk.Label(paging, text="Rows per page:", style="Muted.TLabel").grid(row=0, column=4, padx=(12, 6))
    app.page_size_var = tk.StringVar()
    app.page_size_combo = ttk.Combobox(
        paging,
        textvariable=app.page_size_var,
        values=[str(n) for n in app.viewer_config.page_size_choices],
        state="readonly",
        style="Viewer.TCombobox",
        width=5,
    )
    app.page_size_combo.grid(row=0, column=5)
    app.page_size_combo.bind("<<ComboboxSelected>>", app._on_page_size_selected)

    sheets_nav = ttk.Frame(controls)
    sheets_nav.grid(row=0, column=4, sticky="e")
    app.prev_sheet_button = ttk.Button(sheets_nav, text="◀ Prev", command=app.prev_sheet)
    app.prev_sheet_button.grid(row=0, column=0)
    app.sheet_position_var = tk.StringVar(value="")
    ttk.Label(sheets_nav, textvariable=app.sheet_position_var, width=8, anchor="center", style="Muted.TLabel").grid(row=0, column=1)
    app.next_sheet_button = ttk.Button(sheets_nav, text="Next ▶", style="Accent.TButton", command=app.next_sheet)
    app.next_sheet_button.grid(row=0, column=2)

    # ----- ERROR BANNER (hidden until needed) -----
    app.error_var = tk.StringVar(value="")
    app.error_label = tk.Label(root, textvariable=app.error_var, anchor="w", padx=16, pady=6)
    app.error_label.grid(row=2, column=0, sticky="ew")
    app.error_label.grid_remove()

    # ----- GRID AREA: canvas + inner frame, both scrollbars -----
    area = ttk.Frame(root)
    area.grid(row=3, column=0, sticky="nsew")
    area.columnconfigure(0, weight=1)
    area.rowconfigure(0, weight=1)

    app.grid_canvas = tk.Canvas(area, highlightthickness=0, borderwidth=0)
    app.grid_canvas.grid(row=0, column=0, sticky="nsew")
    yscroll = ttk.Scrollbar(area, orient="vertical", command=app.grid_canvas.yview)
    yscroll.grid(row=0, column=1, sticky="ns")
    xscroll = ttk.Scrollbar(area, orient="horizontal", command=app.grid_canvas.xview)
    xscroll.grid(row=1, column=0, sticky="ew")
    app.grid_canvas.configure(yscrollcommand=yscroll.set, xscrollcommand=xscroll.set)

    app.grid_frame = tk.Frame(app.grid_canvas)
    app.grid_canvas.create_window((0, 0), window=app.grid_frame, anchor="nw")
    app.grid_frame.bind(
        "<Configure>",
        lambda e: app.grid_canvas.configure(scrollregion=app.grid_canvas.bbox("all")),
    )

    app.empty_label = tk.Label(area, text="No data found in this sheet.")

    # ----- FOOTER -----
    footer = ttk.Frame(root, padding=(16, 4))
    footer.grid(row=4, column=0, sticky="ew")
    footer.columnconfigure(0, weight=1)
    app.file_name_var = tk.StringVar(value="No file loaded")
    ttk.Label(footer, textvariable=app.file_name_var, style="Muted.TLabel").grid(row=0, column=0, sticky="w")
    app.total_rows_var = tk.StringVar(value="")
    ttk.Label(footer, textvariable=app.total_rows_var, style="Muted.TLabel").grid(row=0, column=1, sticky="e")

    apply_theme(app, app.theme)
