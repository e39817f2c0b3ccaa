"""
feedtui - terminal dashboard for feeds, with a companion creature.

Architecture:
- feeds/: Fetchers (one per widget kind) and the payload types they return
- creature/: Companion engine, overlay menu state, art and persistence
- widgets.py: Per-cell widget state, built from config
- scheduler.py: Polling loops and the queue they publish into
- dashboard.py: Selection, controls, message routing and companion ticks
- views/: Textual screen/panel components
- app.py: Main application entry point

Extensibility points:
1. New widget kinds: Add a config, a payload, a fetcher and a widget class
2. New overlay tabs: Extend MenuTab and render it in views/creature_menu.py
"""

__version__ = "0.1.0"
