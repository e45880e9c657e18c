"""Render-surface adapter: geometry, the surface protocol and the headless scene.

Submodules are imported directly (``globeview.rendering.surface``, ...);
``globeview.models.camera`` depends on ``geometry`` so this package does not
re-export anything.
"""
