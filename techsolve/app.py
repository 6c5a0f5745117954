import time
import logging
import tkinter as tk
from tkinter import messagebox

from .bases import NumberBase
from .calculator import Calculator, Mode
from .settings import JsonSettingsStore

THEMES = {
    "light": {"bg": "#DAD7C5", "panel": "#F5F3EB", "text": "#244747", "dim": "#4E706B",
              "button_bg": "#FFFFFF", "op_bg": "#7B9C92", "op_text": "white", "accent_bg": "#244747", "accent_text": "#DAD7C5"},
    "dark": {"bg": "#0B272A", "panel": "#244747", "text": "#DAD7C5", "dim": "#7B9C92",
             "button_bg": "#244747", "op_bg": "#4E706B", "op_text": "#DAD7C5", "accent_bg": "#7B9C92", "accent_text": "#0B272A"},
}
SCIENTIFIC_FUNCTIONS = ['sin', 'cos', 'tan', 'log', 'ln', 'sqrt', 'x²', 'exp', 'fact']


class CalculatorApp:
    def __init__(self, settings_file=None):
        self.logger = logging.getLogger(__name__)
        self.root = tk.Tk()
        self.root.title("TechSolve")
        self.root.resizable(False, False)

        store = JsonSettingsStore(settings_file) if settings_file else JsonSettingsStore()
        self.calc = Calculator(store=store, scheduler=self.root, on_change=lambda _calc: self.refresh())

        self.font_family = "Arial"
        self.expression_var = tk.StringVar()
        self.display_var = tk.StringVar()
        self.readouts_var = tk.StringVar()
        self.start_var, self.end_var, self.birth_var = tk.StringVar(), tk.StringVar(), tk.StringVar()
        self.start_var.trace_add("write", lambda *_: self.calc.set_start_date(self.start_var.get()))
        self.end_var.trace_add("write", lambda *_: self.calc.set_end_date(self.end_var.get()))
        self.birth_var.trace_add("write", lambda *_: self.calc.set_birth_date(self.birth_var.get()))

        self.build()
        self.root.bind("<Key>", self.on_key)
        self.root.protocol("WM_DELETE_WINDOW", self.on_close)
        self.refresh()

    @property
    def colors(self): return THEMES[self.calc.theme]

    def build(self):
        for widget in self.root.winfo_children(): widget.destroy()
        c = self.colors
        self.root.configure(bg=c["bg"])
        self.main = tk.Frame(self.root, bg=c["panel"], padx=12, pady=12)
        self.main.pack(fill=tk.BOTH, expand=True, padx=10, pady=10)

        header = tk.Frame(self.main, bg=c["panel"]); header.pack(fill=tk.X)
        tk.Label(header, text="TechSolve", font=(self.font_family, 16, "bold"), bg=c["panel"], fg=c["dim"]).pack(side=tk.LEFT)
        tk.Button(header, text="☾" if self.calc.theme == "dark" else "☀", command=self.calc.toggle_theme, **self.button_options("op")).pack(side=tk.RIGHT, padx=2)
        tk.Button(header, text="X" if self.calc.show_history else "H", command=self.calc.toggle_history, **self.button_options("op")).pack(side=tk.RIGHT, padx=2)
        tk.Button(header, text="Copy", command=self.calc.copy_display, **self.button_options("op")).pack(side=tk.RIGHT, padx=2)

        if self.calc.show_history: self.build_history()

        tabs = tk.Frame(self.main, bg=c["panel"]); tabs.pack(fill=tk.X, pady=(8, 4))
        for mode in Mode:
            active = mode is self.calc.mode
            tk.Button(tabs, text=mode.value.capitalize(), command=lambda m=mode: self.calc.switch_mode(m),
                      relief=tk.SUNKEN if active else tk.FLAT, bd=0, bg=c["panel"], fg=c["text"] if active else c["dim"],
                      activebackground=c["panel"], font=(self.font_family, 10, "bold" if active else "normal")
                      ).pack(side=tk.LEFT, expand=True, fill=tk.X)

        screen = tk.Frame(self.main, bg=c["bg"], padx=8, pady=8); screen.pack(fill=tk.X, pady=4)
        tk.Label(screen, textvariable=self.expression_var, anchor="e", bg=c["bg"], fg=c["dim"], font=(self.font_family, 10)).pack(fill=tk.X)
        tk.Label(screen, textvariable=self.display_var, anchor="e", bg=c["bg"], fg=c["text"], font=(self.font_family, 24)).pack(fill=tk.X)

        self.keypad = tk.Frame(self.main, bg=c["panel"]); self.keypad.pack(fill=tk.BOTH, expand=True)
        {Mode.STANDARD: self.build_standard, Mode.SCIENTIFIC: self.build_scientific,
         Mode.PROGRAMMER: self.build_programmer, Mode.DATE: self.build_date}[self.calc.mode]()
        self._built_for = self.layout_key()

    def layout_key(self):
        calc = self.calc
        latest = calc.history[0] if len(calc.history) else None
        return (calc.mode, calc.theme, calc.show_history, calc.state.number_base, calc.state.angle_mode, len(calc.history), latest)

    def button_options(self, kind="digit"):
        c = self.colors
        bg, fg = {"digit": (c["button_bg"], c["text"]), "op": (c["op_bg"], c["op_text"]),
                  "accent": (c["accent_bg"], c["accent_text"])}[kind]
        return {"bg": bg, "fg": fg, "activebackground": c["dim"], "bd": 0, "font": (self.font_family, 12), "padx": 4, "pady": 6}

    def grid_buttons(self, parent, labels, command_for, columns=4, kind_for=None):
        for i, label in enumerate(labels):
            kind = kind_for(label) if kind_for else "digit"
            tk.Button(parent, text=label, command=command_for(label), **self.button_options(kind)
                      ).grid(row=i // columns, column=i % columns, sticky="nsew", padx=2, pady=2)
        for col in range(columns): parent.grid_columnconfigure(col, weight=1, uniform="keys")

    def key_command(self, label):
        calc = self.calc
        if label == 'C': return calc.clear
        if label == '←': return calc.backspace
        if label == '=': return calc.equals
        if label in SCIENTIFIC_FUNCTIONS: return lambda: calc.apply_function(label)
        if label in ('(', ')'): return lambda: calc.press_paren(label)
        if label in ('+', '-', '*', '/'): return lambda: calc.press_operator(label)
        return lambda: calc.press_digit(label)

    @staticmethod
    def key_kind(label):
        if label == '=': return "accent"
        return "digit" if label.isdigit() or label == '.' else "op"

    def build_standard(self):
        labels = ['C', '←', '/', '*', '7', '8', '9', '-', '4', '5', '6', '+', '1', '2', '3', '=', '0', '.']
        pad = tk.Frame(self.keypad, bg=self.colors["panel"]); pad.pack(fill=tk.BOTH, expand=True)
        self.grid_buttons(pad, labels, self.key_command, kind_for=self.key_kind)

    def build_scientific(self):
        c = self.colors
        top = tk.Frame(self.keypad, bg=c["panel"]); top.pack(fill=tk.X)
        tk.Button(top, text=self.calc.state.angle_mode.value.upper(), command=self.calc.toggle_angle_mode,
                  **self.button_options("op")).pack(side=tk.RIGHT, pady=2)
        pad = tk.Frame(self.keypad, bg=c["panel"]); pad.pack(fill=tk.BOTH, expand=True)
        labels = SCIENTIFIC_FUNCTIONS + ['(', ')', '/',
                  '7', '8', '9', '*', '4', '5', '6', '-', '1', '2', '3', '+', '0', '.', 'C', '=']
        self.grid_buttons(pad, labels, self.key_command, kind_for=self.key_kind)

    def build_programmer(self):
        c = self.colors
        bases = tk.Frame(self.keypad, bg=c["panel"]); bases.pack(fill=tk.X)
        self.grid_buttons(bases, [b.name for b in NumberBase], lambda b: lambda: self.calc.switch_base(b),
                          kind_for=lambda b: "accent" if b == self.calc.state.number_base.name else "op")
        tk.Label(self.keypad, textvariable=self.readouts_var, justify=tk.LEFT, anchor="w", bg=c["bg"], fg=c["dim"],
                 font=("Courier", 9)).pack(fill=tk.X, pady=4)
        ops = tk.Frame(self.keypad, bg=c["panel"]); ops.pack(fill=tk.X)
        bitwise_cmd = lambda op: lambda: self.calc.apply_bitwise(op)
        self.grid_buttons(ops, ['AND', 'OR', 'XOR', 'NOT', 'LSHIFT', 'RSHIFT', 'C', '←'],
                          lambda l: self.key_command(l) if l in ('C', '←') else bitwise_cmd(l), kind_for=lambda _l: "op")
        digits = tk.Frame(self.keypad, bg=c["panel"]); digits.pack(fill=tk.BOTH, expand=True)
        hex_digits = ['A', 'B', 'C', 'D', 'E', 'F'] if self.calc.state.number_base is NumberBase.HEX else []
        self.grid_buttons(digits, hex_digits + ['7', '8', '9', '4', '5', '6', '1', '2', '3', '0', '='],
                          lambda l: self.calc.equals if l == '=' else (lambda: self.calc.press_digit(l)),
                          columns=3 if not hex_digits else 6, kind_for=self.key_kind)

    def build_date(self):
        c = self.colors
        entry_opts = {"bg": c["bg"], "fg": c["text"], "insertbackground": c["text"], "relief": tk.FLAT, "font": (self.font_family, 11)}
        label_opts = {"bg": c["panel"], "fg": c["dim"], "anchor": "w"}
        tk.Label(self.keypad, text="Date Difference (YYYY-MM-DD)", **label_opts).pack(fill=tk.X, pady=(6, 2))
        tk.Entry(self.keypad, textvariable=self.start_var, **entry_opts).pack(fill=tk.X, pady=2)
        tk.Entry(self.keypad, textvariable=self.end_var, **entry_opts).pack(fill=tk.X, pady=2)
        tk.Button(self.keypad, text="Calculate Difference", command=self.calc.calculate_difference, **self.button_options("accent")).pack(fill=tk.X, pady=4)
        tk.Label(self.keypad, text="Age Calculator (birth date)", **label_opts).pack(fill=tk.X, pady=(10, 2))
        tk.Entry(self.keypad, textvariable=self.birth_var, **entry_opts).pack(fill=tk.X, pady=2)
        tk.Button(self.keypad, text="Calculate Age", command=self.calc.calculate_age, **self.button_options("accent")).pack(fill=tk.X, pady=4)

    def build_history(self):
        c = self.colors
        frame = tk.Frame(self.main, bg=c["bg"]); frame.pack(fill=tk.X, pady=(8, 0))
        y_scroll = tk.Scrollbar(frame, orient=tk.VERTICAL)
        self.history_listbox = tk.Listbox(frame, yscrollcommand=y_scroll.set, height=6, font=(self.font_family, 10),
                                          selectmode=tk.SINGLE, bg=c["bg"], fg=c["text"], bd=0, highlightthickness=0)
        y_scroll.config(command=self.history_listbox.yview)
        y_scroll.pack(side=tk.RIGHT, fill=tk.Y); self.history_listbox.pack(side=tk.LEFT, fill=tk.BOTH, expand=True)
        if not len(self.calc.history): self.history_listbox.insert(tk.END, "No history yet")
        for entry in self.calc.history:
            stamp = time.strftime("%H:%M:%S", time.localtime(entry.timestamp / 1000))
            self.history_listbox.insert(tk.END, f"[{stamp}] {entry.expression} = {entry.result}")
        btn_f = tk.Frame(self.main, bg=c["panel"]); btn_f.pack(fill=tk.X)
        tk.Button(btn_f, text="Copy Result", command=lambda: self.copy_selected("result"), **self.button_options("op")).pack(side=tk.LEFT, padx=2, pady=2)
        tk.Button(btn_f, text="Copy Expression", command=lambda: self.copy_selected("expression"), **self.button_options("op")).pack(side=tk.LEFT, padx=2, pady=2)
        tk.Button(btn_f, text="Clear History", command=self.confirm_clear_history, **self.button_options("op")).pack(side=tk.RIGHT, padx=2, pady=2)

    def copy_selected(self, part):
        sel = self.history_listbox.curselection()
        if not sel or not len(self.calc.history): messagebox.showwarning("Copy History", "No item selected.", parent=self.root); return
        if not self.calc.copy_history_entry(sel[0], part):
            messagebox.showerror("Copy History", "Clipboard is not available.", parent=self.root)

    def confirm_clear_history(self):
        if messagebox.askyesno("Confirm Clear", "Clear all history?", parent=self.root):
            self.calc.clear_history()

    def refresh(self):
        calc = self.calc
        if self.layout_key() != getattr(self, "_built_for", None):
            self.build()
        self.expression_var.set(calc.expression)
        self.display_var.set(calc.display)
        if calc.mode is Mode.PROGRAMMER:
            self.readouts_var.set("\n".join(f"{name}: {value}" for name, value in calc.base_readouts().items()))

    def on_key(self, event):
        if isinstance(event.widget, tk.Entry): return
        char, key = event.char, event.keysym
        if key in ("Return", "KP_Enter") or char == '=': self.calc.equals()
        elif key == "BackSpace": self.calc.backspace()
        elif key == "Escape": self.calc.clear()
        elif char in ('+', '-', '*', '/'): self.calc.press_operator(char)
        elif char in ('(', ')'): self.calc.press_paren(char)
        elif char and (char.isdigit() or char == '.' or char.upper() in "ABCDEF"): self.calc.press_digit(char)

    def on_close(self):
        self.logger.info("Shutting down...")
        self.calc.close()
        try: self.root.quit(); self.root.destroy()
        except tk.TclError: pass
        self.logger.info("Application closed.")
