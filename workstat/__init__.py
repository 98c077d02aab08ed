"""WorkStat: a weighted to-do list with a pie chart of the allocation.

Modules:
- config: INI settings, user data paths, logging setup
- models: to-do items, palette and serialization
- prefs: flat key-value preference file
- budget: percentage budget validation
- store: item list with persistence and change notification
- chart: pie slice geometry and matplotlib rendering
- export: pandas/CSV export of the list
- ui: UI helpers (items, delegates, chart canvas)
- app: main window and dialogs
"""

__version__ = "1.0"
__build__ = "1"
