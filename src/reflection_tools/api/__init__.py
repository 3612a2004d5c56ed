"""
High-level API: options, images, preview and output surfaces, and the
editing session.

Submodules are imported explicitly, e.g.
``from reflection_tools.api.session import EditorSession``.
"""
