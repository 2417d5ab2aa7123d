"""ViewModel package for maintenance state and command surfaces.

Call context:
    ``winopt/app/controller.py`` builds the concrete view-model; the NiceGUI
    page and the CLI bind to its commands and change events.

Dependencies:
    Modules in this package depend on domain types, use cases and lightweight
    formatting helpers only. OS adapters stay outside.

Responsibilities:
    - Expose observable state and guarded command surfaces.
    - Turn use-case results and failures into status text and audit entries.
    - Keep MVVM boundaries explicit by avoiding OS or persistence logic.
"""
